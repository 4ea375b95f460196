import os
from dataclasses import dataclass

from Engine.errors import RedirectionError

PIPE = "|"

STDOUT = 1
STDERR = 2

TRUNCATE = "truncate"
APPEND = "append"

# operator -> (stream, mode)
REDIRECT_OPERATORS = {
    ">": (STDOUT, TRUNCATE),
    "1>": (STDOUT, TRUNCATE),
    "2>": (STDERR, TRUNCATE),
    ">>": (STDOUT, APPEND),
    "1>>": (STDOUT, APPEND),
    "2>>": (STDERR, APPEND),
}


@dataclass
class RedirectionSpec:
    """Where one command's stdout or stderr is sent."""
    stream: int
    mode: str
    path: str

    @property
    def flags(self):
        flags = os.O_CREAT | os.O_WRONLY
        return flags | (os.O_APPEND if self.mode == APPEND else os.O_TRUNC)


def split_pipeline(line):
    """
    Split a raw command line into pipeline segments.
    Every `|` separates, even one written inside quotes.
    Returns: list of trimmed segments, at least one
    """
    segments = []
    for segment in line.split(PIPE):
        segments.append(segment.lstrip(" ").rstrip(" \n"))
    return segments


def resolve_redirection(argv):
    """
    Find the first redirection operator in argv.
    Returns: (argv without the operator and what follows it, RedirectionSpec or None)
    """
    for i, tok in enumerate(argv):
        if tok not in REDIRECT_OPERATORS:
            continue
        if i + 1 >= len(argv):
            raise RedirectionError("syntax error near unexpected token `newline'")
        stream, mode = REDIRECT_OPERATORS[tok]
        return argv[:i], RedirectionSpec(stream, mode, argv[i + 1])
    return list(argv), None
