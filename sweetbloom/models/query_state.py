# sweetbloom/models/query_state.py

"""Transient search/filter/sort selections for a catalog view."""

from dataclasses import dataclass


@dataclass(frozen=True)
class QueryState:
    """The selections that drive the displayed subset of the catalog."""

    category: str = "all"
    price_range: str = "all"
    sort: str = "default"
    search_text: str = ""
