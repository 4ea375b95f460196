import os

from Engine.logger import get_logger

log = get_logger("path")


def parse_search_path(value):
    """Split a PATH value into its ordered directories"""
    if not value:
        return []
    return value.split(":")


def _entries(directory):
    """Names in one directory, dotfiles skipped. Unreadable directories are empty."""
    try:
        with os.scandir(directory) as it:
            return [entry.name for entry in it if not entry.name.startswith(".")]
    except OSError as e:
        log.debug("skipping search path entry %r: %s", directory, e.strerror)
        return []


def find_in_path(name, search_path):
    """
    Find the first directory of search_path that contains `name`.
    Directories are listed again on every call so new executables show up at once.
    Returns: directory string or None
    """
    if not name:
        return None
    for directory in search_path:
        if name in _entries(directory):
            return directory
    return None


def list_commands(prefix, search_path):
    """Every entry of search_path starting with prefix, first occurrence kept"""
    seen = set()
    matches = []
    for directory in search_path:
        for name in sorted(_entries(directory)):
            if name.startswith(prefix) and name not in seen:
                seen.add(name)
                matches.append(name)
    return matches
