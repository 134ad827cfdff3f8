import os
from pathlib import Path


def get_cache_dir() -> Path:
    xdg = os.environ.get("XDG_CACHE_HOME")
    if xdg:
        base = Path(xdg)
    else:
        base = Path.home() / ".cache"
    return base / "httpopts"


def get_log_dir() -> Path:
    return get_cache_dir() / "log"


def get_log_path() -> Path:
    return get_log_dir() / "daemon.log"
