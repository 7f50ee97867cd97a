"""Load and validate environment variables. Uses python-dotenv.

This module is intentionally thin and side-effect free except for loading `.env`.
Callers should use the accessor functions below rather than reading `os.environ`
directly, to keep environment handling consistent.
"""

from pathlib import Path

from dotenv import load_dotenv
import os

DEFAULT_QUOTE_ENDPOINT = "https://formsubmit.co/ajax/quotes@example.com"


def _project_root() -> Path:
    """
    Resolve the project root: MEDQUOTE_ROOT when set, the checkout holding
    app.py when running from source, otherwise the working directory (an
    installed package lives in site-packages, away from data/ and .env).
    """
    override = os.getenv("MEDQUOTE_ROOT", "").strip()
    if override:
        return Path(override).expanduser().resolve()
    checkout = Path(__file__).resolve().parent.parent.parent
    if (checkout / "app.py").is_file():
        return checkout
    return Path.cwd()


def load_config() -> None:
    """
    Load .env from project root. Idempotent; safe to call multiple times.
    Values already exported in the environment win over .env.
    """
    root = _project_root()
    env_path = root / ".env"
    load_dotenv(env_path, override=False)


def get_optional(key: str, default: str = "") -> str:
    """Get optional env var; return default if missing or empty."""
    load_config()
    val = os.getenv(key, "").strip()
    return val if val else default


def get_optional_int(key: str, default: int) -> int:
    """Get optional env var as int; return default if missing or invalid."""
    load_config()
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_optional_float(key: str, default: float) -> float:
    """Get optional env var as float; return default if missing or invalid."""
    load_config()
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# --- Public config accessors ---

def quote_endpoint() -> str:
    """Optional: quote-intake URL (FormSubmit AJAX endpoint or compatible)."""
    return get_optional("QUOTE_ENDPOINT", DEFAULT_QUOTE_ENDPOINT)


def quote_subject() -> str:
    """Optional: `_subject` sent with every quote request."""
    return get_optional("QUOTE_SUBJECT", "New Medicine Request")


def quote_template() -> str:
    """Optional: `_template` sent with every quote request. Default table."""
    return get_optional("QUOTE_TEMPLATE", "table")


def quote_timeout_seconds() -> float:
    """Optional: HTTP timeout for the quote POST. Default 30."""
    return get_optional_float("QUOTE_TIMEOUT_SECONDS", 30.0)


def quote_clear_delay_ms() -> int:
    """Optional: delay between a successful submission and clearing the cart. Default 5000."""
    return max(0, get_optional_int("QUOTE_CLEAR_DELAY_MS", 5000))


def quote_close_delay_ms() -> int:
    """Optional: delay between clearing the cart and closing the panel. Default 2000."""
    return max(0, get_optional_int("QUOTE_CLOSE_DELAY_MS", 2000))


def timer_poll_seconds() -> float:
    """Optional: how often the UI polls pending timers. Default 1.0."""
    return get_optional_float("TIMER_POLL_SECONDS", 1.0)


def cart_store_path() -> Path:
    """Optional: JSON file backing the durable store."""
    raw = get_optional("CART_STORE_PATH", "")
    if raw:
        return Path(raw)
    return _project_root() / "data" / "store" / "cart_store.json"


def cart_storage_key() -> str:
    """Optional: key the cart is stored under. Default cart."""
    return get_optional("CART_STORAGE_KEY", "cart")


def catalog_path() -> Path:
    """Optional: medicine catalog JSON file."""
    raw = get_optional("CATALOG_PATH", "")
    if raw:
        return Path(raw)
    return _project_root() / "data" / "catalog" / "medicines.json"


def log_level() -> str:
    """Optional: log level name. Default INFO."""
    return get_optional("LOG_LEVEL", "INFO").upper()


def log_file() -> Path | None:
    """Optional: also write logs to this file. Default none (stderr only)."""
    raw = get_optional("LOG_FILE", "")
    return Path(raw) if raw else None


def project_root() -> Path:
    """Project root directory."""
    return _project_root()
