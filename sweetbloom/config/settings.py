# sweetbloom/config/settings.py

"""Central configuration for the SweetBloom storefront client."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean flag from the environment."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Central configuration for the SweetBloom storefront client."""

    # --- Remote services ---
    FIREBASE_API_KEY: str = os.getenv("FIREBASE_API_KEY", "")
    FIREBASE_PROJECT_ID: str = os.getenv("FIREBASE_PROJECT_ID", "")
    USE_REMOTE_CATALOG: bool = _env_flag("SWEETBLOOM_USE_REMOTE_CATALOG")
    PRODUCTS_COLLECTION: str = "products"
    FIRESTORE_BASE_URL: str = "https://firestore.googleapis.com/v1"
    IDENTITY_BASE_URL: str = "https://identitytoolkit.googleapis.com/v1"

    # --- HTTP ---
    REQUEST_DELAY: float = 0.5          # Seconds of back-off per retry
    REQUEST_TIMEOUT: int = 10           # Seconds before a request times out
    MAX_RETRIES: int = 3                # Retry count on transient failures
    MAX_PAGES: int = 10                 # Max pagination depth per listing
    PAGE_SIZE: int = 100                # Documents per Firestore page

    # --- Resilience ---
    CIRCUIT_BREAKER_THRESHOLD: int = 3  # Consecutive failures to trip
    CIRCUIT_BREAKER_COOLDOWN: float = 60.0
    MAX_DELAY_MULTIPLIER: int = 8       # Cap for adaptive backoff
    HEALTH_SLOW_MS: float = 3000.0      # Probe latency reported as "slow"

    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "fr-FR,fr;q=0.9,en;q=0.8",
        "Content-Type": "application/json",
    }

    # --- Storefront ---
    CURRENCY: str = "DH"
    FAVORITES_KEY: str = "@sweetbloom_favorites"
    MIN_PASSWORD_LENGTH: int = 6
    SEARCH_DEBOUNCE_SECONDS: float = 0.25

    CATEGORIES: list[dict[str, str]] = [
        {"id": "all", "label": "Tous"},
        {"id": "fleurs", "label": "Fleurs"},
        {"id": "chocolats", "label": "Chocolats"},
        {"id": "gateaux", "label": "Gâteaux"},
    ]

    # Half-open bands: min <= price < max
    PRICE_RANGES: list[dict[str, object]] = [
        {"id": "all", "label": "Tous les prix", "min": 0.0, "max": float("inf")},
        {"id": "low", "label": "Moins de 100 DH", "min": 0.0, "max": 100.0},
        {"id": "mid", "label": "100 - 300 DH", "min": 100.0, "max": 300.0},
        {"id": "high", "label": "300 DH et plus", "min": 300.0, "max": float("inf")},
    ]

    SORT_OPTIONS: list[dict[str, str]] = [
        {"id": "default", "label": "Par défaut"},
        {"id": "price_asc", "label": "Prix croissant"},
        {"id": "price_desc", "label": "Prix décroissant"},
        {"id": "name_asc", "label": "Nom A-Z"},
        {"id": "popular", "label": "Populaire"},
    ]

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    FALLBACK_CATALOG_PATH: Path = (
        BASE_DIR / "sweetbloom" / "config" / "fallback_catalog.json"
    )
    DATA_DIR: Path = Path(
        os.getenv("SWEETBLOOM_DATA_DIR", str(BASE_DIR / "data"))
    )
    STORAGE_DB_PATH: Path = DATA_DIR / "sweetbloom.db"
    LOGS_DIR: Path = Path(
        os.getenv("SWEETBLOOM_LOG_DIR", str(BASE_DIR / "logs"))
    )

    # --- Logging ---
    LOG_LEVEL: str = os.getenv("SWEETBLOOM_LOG_LEVEL", "DEBUG")
    CONSOLE_LOG_LEVEL: str = os.getenv("SWEETBLOOM_CONSOLE_LOG_LEVEL", "WARNING")
