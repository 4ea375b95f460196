import readline
import sys

from Engine.builtin import BUILTINS
from Engine.logger import get_logger
from Engine.path_resolver import list_commands

log = get_logger("prompt")


def complete_command(prefix, search_path, builtins=BUILTINS):
    """Completion candidates: builtins first, then search path entries"""
    matches = [name for name in builtins if name.startswith(prefix)]
    for name in list_commands(prefix, search_path):
        if name not in matches:
            matches.append(name)
    return matches


class LineReader:
    """Yields one raw line per call, or None at end of input."""

    def __init__(self, session):
        self.session = session
        self._matches = []

    def setup(self):
        """Tab completion of command names and history mirroring"""
        self.session.history.on_load = readline.add_history
        if not sys.stdin.isatty():
            log.debug("stdin is not a terminal, line editing disabled")
            return
        readline.set_completer(self.complete)
        readline.set_completer_delims(" \t\n")
        readline.parse_and_bind("tab: complete")
        readline.parse_and_bind("set editing-mode emacs")

    def complete(self, text, state):
        if state == 0:
            self._matches = complete_command(text, self.session.search_path)
        if state < len(self._matches):
            return self._matches[state] + " "
        return None

    def read(self):
        try:
            return input(self.session.prompt)
        except EOFError:
            return None
        except KeyboardInterrupt:
            # Ctrl+C at the prompt only moves to a fresh line
            print()
            return ""
