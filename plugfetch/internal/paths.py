import os
from pathlib import Path


# ---------------------------------------------------------------------
# Base directories
# ---------------------------------------------------------------------

def get_app_data_dir() -> Path:
    """
    Returns the application data directory.

    - PLUGFETCH_HOME, when set
    - Windows: %APPDATA%\\plugfetch
    - Linux/macOS: ~/.plugfetch
    """
    override = os.environ.get("PLUGFETCH_HOME")
    if override:
        path = Path(override)
    elif os.name == "nt":  # Windows
        base = os.environ.get("APPDATA", str(Path.home()))
        path = Path(base) / "plugfetch"
    else:  # Linux / macOS
        path = Path.home() / ".plugfetch"

    path.mkdir(parents=True, exist_ok=True)
    return path


def get_plugins_dir() -> Path:
    """
    Default destination directory for fetched plugin jars.
    """
    path = get_app_data_dir() / "plugins"
    path.mkdir(parents=True, exist_ok=True)
    return path


# ---------------------------------------------------------------------
# Logs
# ---------------------------------------------------------------------

def get_log_dir() -> Path:
    path = get_app_data_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_log_file() -> Path:
    return get_log_dir() / "plugfetch.log.json"
