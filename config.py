import json
import os
import threading

# =============================================================================
# Videoclub Configuration
# Priority: environment variables > settings.json > defaults
# =============================================================================

SETTINGS_FILE = os.getenv("VIDEOCLUB_SETTINGS_FILE", "/data/videoclub/settings.json")

_lock = threading.Lock()
_file_settings = {}
MASKED_SECRET = "••••••••"
SECRET_KEYS = ("prowlarr_api_key", "tmdb_api_key")


def _load_file_settings():
    global _file_settings
    try:
        with open(SETTINGS_FILE, "r") as f:
            _file_settings = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError):
        _file_settings = {}


def save_settings(new_settings):
    global _file_settings
    with _lock:
        _load_file_settings()
        _file_settings.update(new_settings)
        os.makedirs(os.path.dirname(SETTINGS_FILE), exist_ok=True)
        with open(SETTINGS_FILE, "w") as f:
            json.dump(_file_settings, f, indent=2)
        # Reload module-level vars
        _apply_settings()


def _get(env_key, json_key, default=""):
    """Get a config value: env var wins, then settings.json, then default."""
    env_val = os.getenv(env_key, "")
    if env_val:
        return env_val
    value = _file_settings.get(json_key, default)
    return default if value is None else value


def _get_int(env_key, json_key, default, minimum=1):
    try:
        return max(minimum, int(_get(env_key, json_key, default)))
    except (TypeError, ValueError):
        return default


def _get_bool(env_key, json_key, default="false"):
    return str(_get(env_key, json_key, default)).lower() in ("true", "1", "yes")


def _apply_settings():
    """Apply settings to module-level variables."""
    global PROWLARR_URL, PROWLARR_API_KEY
    global TMDB_API_KEY, TMDB_BASE_URL, TMDB_IMAGE_BASE_URL
    global DB_PATH, FEATURED_CONTENT_TTL_SECONDS, DRY_RUN
    global SCHEDULER_MODE, CATEGORY_ITEM_LIMIT, ENRICH_BATCH_SIZE, HTTP_TIMEOUT_SEC

    # Prowlarr (search provider)
    PROWLARR_URL = _get("PROWLARR_URL", "prowlarr_url").rstrip("/")
    PROWLARR_API_KEY = _get("PROWLARR_API_KEY", "prowlarr_api_key")

    # TMDb (metadata provider)
    TMDB_API_KEY = _get("TMDB_API_KEY", "tmdb_api_key")
    TMDB_BASE_URL = _get("TMDB_BASE_URL", "tmdb_base_url", "https://api.themoviedb.org/3").rstrip("/")
    TMDB_IMAGE_BASE_URL = _get("TMDB_IMAGE_BASE_URL", "tmdb_image_base_url", "https://image.tmdb.org/t/p").rstrip("/")

    # Document store
    DB_PATH = _get("VIDEOCLUB_DB_PATH", "db_path", "/data/videoclub/videoclub.db")

    # Featured content cache
    FEATURED_CONTENT_TTL_SECONDS = _get_int("FEATURED_CONTENT_TTL_SECONDS", "featured_content_ttl_seconds", 3600)
    DRY_RUN = _get_bool("VIDEOCLUB_DRY_RUN", "dry_run")

    # Refresh pipeline
    SCHEDULER_MODE = _get("VIDEOCLUB_SCHEDULER", "scheduler_mode", "auto").lower()
    CATEGORY_ITEM_LIMIT = _get_int("CATEGORY_ITEM_LIMIT", "category_item_limit", 15)
    ENRICH_BATCH_SIZE = _get_int("ENRICH_BATCH_SIZE", "enrich_batch_size", 10)
    HTTP_TIMEOUT_SEC = _get_int("VIDEOCLUB_HTTP_TIMEOUT_SEC", "http_timeout_sec", 30)


# Feature flags
def has_prowlarr():
    return bool(PROWLARR_URL and PROWLARR_API_KEY)


def has_tmdb():
    return bool(TMDB_API_KEY)


def get_all_settings():
    """Return current settings (for the settings UI), masking sensitive values."""
    return {
        "prowlarr_url": PROWLARR_URL,
        "prowlarr_api_key": MASKED_SECRET if PROWLARR_API_KEY else "",
        "tmdb_api_key": MASKED_SECRET if TMDB_API_KEY else "",
        "tmdb_base_url": TMDB_BASE_URL,
        "tmdb_image_base_url": TMDB_IMAGE_BASE_URL,
        "db_path": DB_PATH,
        "featured_content_ttl_seconds": FEATURED_CONTENT_TTL_SECONDS,
        "dry_run": DRY_RUN,
        "scheduler_mode": SCHEDULER_MODE,
        "category_item_limit": CATEGORY_ITEM_LIMIT,
        "enrich_batch_size": ENRICH_BATCH_SIZE,
    }


# Initialize on import
_load_file_settings()
_apply_settings()
