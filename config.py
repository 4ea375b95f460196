import os


def _int_setting(name, default):
    value = os.environ.get(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


PROMPT = "$ "

# History file loaded at startup and written on `exit`
HISTORY_FILE = os.environ.get("HISTFILE") or None

# 0 means tokens are never truncated
MAX_TOKEN_LENGTH = _int_setting("FORKSHELL_MAX_TOKEN_LENGTH", 0) or None

LOG_LEVEL = os.environ.get("FORKSHELL_LOG_LEVEL", "WARNING").upper()
LOG_FILE = os.environ.get("FORKSHELL_LOG_FILE") or None
