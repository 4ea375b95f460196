import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import config
from Engine.history import History
from Engine.logger import get_logger
from Engine.path_resolver import parse_search_path

log = get_logger("session")


@dataclass
class Session:
    """State shared by every component for the life of the shell."""
    search_path: List[str] = field(default_factory=list)
    home: Optional[str] = None
    environment: Dict[str, str] = field(default_factory=lambda: dict(os.environ))
    history: History = field(default_factory=History)
    history_file: Optional[str] = None
    prompt: str = config.PROMPT
    max_token_length: Optional[int] = None

    @classmethod
    def from_environ(cls, environ=None):
        """Build the session once at startup from the environment and config"""
        environ = dict(os.environ if environ is None else environ)
        if "PATH" not in environ:
            log.warning("PATH is not set, only builtins and paths with '/' will run")
        return cls(
            search_path=parse_search_path(environ.get("PATH", "")),
            home=environ.get("HOME"),
            environment=environ,
            history_file=environ.get("HISTFILE") or config.HISTORY_FILE,
            prompt=config.PROMPT,
            max_token_length=config.MAX_TOKEN_LENGTH,
        )
