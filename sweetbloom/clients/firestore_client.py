# sweetbloom/clients/firestore_client.py

"""Firestore REST client for the product document collection."""

import json
from typing import Any, cast
from urllib.parse import quote

from curl_cffi import requests as curl_requests

from sweetbloom.clients.base_client import RemoteClient
from sweetbloom.errors import DataFetchError


def decode_value(value: dict[str, Any]) -> Any:
    """Convert one typed Firestore value into a plain Python value."""
    if "stringValue" in value:
        return value["stringValue"]
    if "integerValue" in value:
        # Firestore sends 64-bit integers as strings
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "timestampValue" in value:
        return value["timestampValue"]
    if "referenceValue" in value:
        return value["referenceValue"]
    if "mapValue" in value:
        fields = value["mapValue"].get("fields", {})
        return {k: decode_value(v) for k, v in fields.items()}
    if "arrayValue" in value:
        items = value["arrayValue"].get("values", [])
        return [decode_value(v) for v in items]
    return None


_DECODE_ERRORS = (ValueError, TypeError, KeyError, AttributeError)


def decode_document(document: dict[str, Any]) -> dict[str, Any]:
    """Flatten a Firestore document into a record with an ``id`` key.

    The id is the last segment of the document ``name``; a stored
    ``id`` field is overridden by it.
    """
    fields = document.get("fields", {})
    record: dict[str, Any] = {
        k: decode_value(v) for k, v in fields.items()
    }
    name = str(document.get("name", ""))
    record["id"] = name.rsplit("/", 1)[-1] if name else record.get("id", "")
    return record


class FirestoreClient(RemoteClient):
    """Read-only access to a Firestore collection over REST."""

    def __init__(self) -> None:
        super().__init__("firestore")

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.FIREBASE_PROJECT_ID)

    def _get_base_url(self) -> str:
        return (
            f"{self.settings.FIRESTORE_BASE_URL}/projects/"
            f"{self.settings.FIREBASE_PROJECT_ID}/databases/(default)/documents"
        )

    def _parse(self, resp: curl_requests.Response | None, what: str) -> Any:
        """Decode a JSON body or raise :class:`DataFetchError`."""
        if resp is None:
            raise DataFetchError(source=what)
        try:
            return json.loads(resp.text or "{}")
        except json.JSONDecodeError as exc:
            self.logger.error(
                "[firestore] Malformed JSON for %s: %s", what, exc
            )
            raise DataFetchError(source=what) from exc

    def _parse_object(
        self, resp: curl_requests.Response | None, what: str,
    ) -> dict[str, Any]:
        """Like :meth:`_parse` but the body must be a JSON object."""
        body = self._parse(resp, what)
        if not isinstance(body, dict):
            self.logger.error(
                "[firestore] Expected an object for %s, got %s",
                what,
                type(body).__name__,
            )
            raise DataFetchError(source=what)
        return cast(dict[str, Any], body)

    def _decode_all(
        self, documents: list[Any], what: str,
    ) -> list[dict[str, Any]]:
        """Decode *documents*, or raise DataFetchError on a malformed one."""
        try:
            return [decode_document(d) for d in documents]
        except _DECODE_ERRORS as exc:
            self.logger.error(
                "[firestore] Malformed document in %s: %s", what, exc
            )
            raise DataFetchError(source=what) from exc

    def list_documents(self, collection: str) -> list[dict[str, Any]]:
        """Return every document of *collection*, following page tokens.

        Stops after ``MAX_PAGES`` pages.
        """
        if not self.is_configured:
            raise DataFetchError(source="firestore:unconfigured")

        url = f"{self._get_base_url()}/{quote(collection)}"
        records: list[dict[str, Any]] = []
        page_token = ""
        for page in range(self.settings.MAX_PAGES):
            params = {"pageSize": str(self.settings.PAGE_SIZE)}
            if page_token:
                params["pageToken"] = page_token
            body = self._parse_object(
                self._fetch_get(url, params), collection
            )
            documents = body.get("documents", [])
            if not isinstance(documents, list):
                raise DataFetchError(source=collection)
            records.extend(self._decode_all(documents, collection))
            page_token = str(body.get("nextPageToken", ""))
            self.logger.debug(
                "[firestore] %s page %d: %d documents",
                collection,
                page + 1,
                len(documents),
            )
            if not page_token:
                break
        else:
            self.logger.warning(
                "[firestore] %s truncated at %d pages",
                collection,
                self.settings.MAX_PAGES,
            )

        self.logger.info(
            "[firestore] Loaded %d documents from %s",
            len(records),
            collection,
        )
        return records

    def query_equal(
        self,
        collection: str,
        field_path: str,
        value: str,
    ) -> list[dict[str, Any]]:
        """Run a structured query ``field_path == value``."""
        if not self.is_configured:
            raise DataFetchError(source="firestore:unconfigured")

        payload: dict[str, Any] = {
            "structuredQuery": {
                "from": [{"collectionId": collection}],
                "where": {
                    "fieldFilter": {
                        "field": {"fieldPath": field_path},
                        "op": "EQUAL",
                        "value": {"stringValue": value},
                    }
                },
            }
        }
        rows = self._parse(
            self._fetch_post(f"{self._get_base_url()}:runQuery", payload),
            f"{collection}?{field_path}={value}",
        )
        if not isinstance(rows, list):
            raise DataFetchError(source=collection)

        # Rows without a "document" key only carry a readTime
        entries = cast(list[dict[str, Any]], rows)
        return self._decode_all(
            [
                row["document"]
                for row in entries
                if isinstance(row, dict) and "document" in row
            ],
            collection,
        )

    def get_document(
        self,
        collection: str,
        doc_id: str,
    ) -> dict[str, Any] | None:
        """Fetch one document; ``None`` when it does not exist."""
        if not self.is_configured:
            raise DataFetchError(source="firestore:unconfigured")

        url = f"{self._get_base_url()}/{quote(collection)}/{quote(doc_id, safe='')}"
        resp = self._fetch_get(url, accept_status=(200, 404))
        if resp is not None and resp.status_code == 404:
            self.logger.info(
                "[firestore] %s/%s not found", collection, doc_id
            )
            return None
        what = f"{collection}/{doc_id}"
        return self._decode_all([self._parse_object(resp, what)], what)[0]
