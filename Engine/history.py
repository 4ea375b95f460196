from Engine.logger import get_logger

log = get_logger("history")


def _printable(line):
    """Undecodable bytes read from a history file, shown as U+FFFD"""
    return line.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


class History:
    """
    In-memory command history.

    Entries are indexed from 1 when shown. `saved` marks how many entries
    have already been appended to a file by `append_file`.
    """

    def __init__(self, entries=None, on_load=None):
        self.entries = list(entries or [])
        self.saved = 0
        # called for every line read from a file, e.g. readline.add_history
        self.on_load = on_load

    def __len__(self):
        return len(self.entries)

    def add(self, line):
        """Add a non-empty command line"""
        if line:
            self.entries.append(line)

    def show(self, limit=None):
        """
        Lines to print for `history` / `history N`.
        Indices stay relative to the full history.
        """
        start = 0
        if limit is not None:
            start = max(len(self.entries) - limit, 0)
        return [f"{i + 1}  {_printable(self.entries[i])}" for i in range(start, len(self.entries))]

    def read_file(self, path):
        """Append every line of `path` to the history"""
        with open(path, "r", encoding="utf-8", errors="surrogateescape") as f:
            lines = [line.rstrip("\n") for line in f]
        for line in lines:
            if not line:
                continue
            self.entries.append(line)
            if self.on_load:
                self.on_load(line)
        log.debug("loaded %d history entries from %s", len(lines), path)

    def write_file(self, path):
        """Overwrite `path` with the whole history"""
        with open(path, "w", encoding="utf-8", errors="surrogateescape") as f:
            for line in self.entries:
                f.write(line + "\n")
        log.debug("wrote %d history entries to %s", len(self.entries), path)

    def append_file(self, path):
        """Append entries added since the last append, then move the save point"""
        new_entries = self.entries[self.saved:]
        if not new_entries:
            return 0
        with open(path, "a", encoding="utf-8", errors="surrogateescape") as f:
            for line in new_entries:
                f.write(line + "\n")
        self.saved = len(self.entries)
        log.debug("appended %d history entries to %s", len(new_entries), path)
        return len(new_entries)
