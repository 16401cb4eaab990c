"""Settings resolution, paths and constants."""

import json
import os
from pathlib import Path
from zoneinfo import ZoneInfo

# ─────────────────────────────────────────────────────
# App home directory — logs and config.json live here
# ─────────────────────────────────────────────────────
APP_DIR = Path(os.environ.get("NEWSFEED_HOME", Path.home() / ".newsfeed"))
LOGS_DIR = APP_DIR / "logs"
CONFIG_FILE = APP_DIR / "config.json"

TRUTHY = {"1", "true", "yes", "on"}


# ─────────────────────────────────────────────────────
# Setting resolution — env → config.json → default
# ─────────────────────────────────────────────────────
def load_config() -> dict:
    """Load the full config.json, including the sources section."""
    if CONFIG_FILE.exists():
        try:
            cfg = json.loads(CONFIG_FILE.read_text())
            if isinstance(cfg, dict):
                return cfg
        except Exception:
            pass
    return {}


def get_setting(name: str, default=None):
    """Resolve a setting: environment variable first, then config.json."""
    val = os.environ.get(name)
    if val:
        return val
    val = load_config().get(name)
    if val is not None and val != "":
        return val
    return default


def env_flag(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUTHY


def _int_setting(name: str, default: int) -> int:
    try:
        return int(get_setting(name, default))
    except (TypeError, ValueError):
        return default


# ─────────────────────────────────────────────────────
# Feed constants
# ─────────────────────────────────────────────────────
DEFAULT_TZ = get_setting("NEWSFEED_TZ", "America/Sao_Paulo")
CACHE_TTL_SECONDS = _int_setting("NEWSFEED_CACHE_TTL", 60 * 60)
FETCH_TIMEOUT = _int_setting("NEWSFEED_FETCH_TIMEOUT", 20)
FALLBACK_WORKERS = _int_setting("NEWSFEED_FALLBACK_WORKERS", 4)

# Undated items stay in the feed (sorted last) unless this is switched off
KEEP_UNDATED = env_flag(get_setting("NEWSFEED_KEEP_UNDATED", True))

# Console verbosity; the log file always records DEBUG
LOG_LEVEL = str(get_setting("NEWSFEED_LOG_LEVEL", "INFO")).upper()

USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36 newsfeed/1.0"
)

# ─────────────────────────────────────────────────────
# Server
# ─────────────────────────────────────────────────────
HOST = get_setting("HOST", "0.0.0.0")
PORT = _int_setting("PORT", 4000)
CLIENT_DIST = Path(get_setting("NEWSFEED_CLIENT_DIST", Path.cwd() / "client" / "dist"))


def get_timezone() -> ZoneInfo:
    """The target timezone used for wall-clock input and day boundaries."""
    return ZoneInfo(DEFAULT_TZ)
