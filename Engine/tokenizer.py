"""
Split one raw input line into an argument vector.

Quoting rules:
  - unquoted spaces separate tokens, runs of spaces collapse
  - outside quotes a backslash makes the next character literal
  - '...' copies everything verbatim up to the next single quote
  - "..." only treats \\ \\$ \\<newline> \\" as escapes, other backslashes stay
  - a closing single quote ends the token unless another quote follows:
    'ab'cd -> ab cd, a'b''c'd -> abcd
  - an unterminated quote runs to the end of the line
"""

SINGLE_QUOTE = "'"
DOUBLE_QUOTE = '"'
BACKSLASH = "\\"

# Characters a backslash escapes inside double quotes
DOUBLE_QUOTE_ESCAPES = ("\\", "$", "\n", '"')


class _Token:
    """Characters of the token being built, with an optional length bound."""

    def __init__(self, max_length=None):
        self.chars = []
        self.max_length = max_length

    def append(self, ch):
        # soft truncation: past the bound characters are dropped silently
        if self.max_length is None or len(self.chars) < self.max_length:
            self.chars.append(ch)

    def text(self):
        return "".join(self.chars)


def tokenize(line, max_length=None):
    """
    Tokenize a command line.
    Returns: list of argument strings (argv), empty for a blank line
    """
    tokens = []
    if not line:
        return tokens

    i, n = 0, len(line)
    while i < n:
        while i < n and line[i] == " ":
            i += 1
        if i >= n:
            break

        token = _Token(max_length)
        while i < n and line[i] != " ":
            ch = line[i]
            if ch == BACKSLASH:
                i += 1
                if i < n:
                    token.append(line[i])
                    i += 1
            elif ch == SINGLE_QUOTE:
                i, token_done = _read_single_quoted(line, i + 1, token)
                if token_done:
                    break
            elif ch == DOUBLE_QUOTE:
                i = _read_double_quoted(line, i + 1, token)
            else:
                token.append(ch)
                i += 1

        tokens.append(token.text())

    return tokens


def _read_single_quoted(line, i, token):
    """
    Copy a '...' span verbatim.
    Returns: (index after the span, True when the closing quote ends the token)
    """
    n = len(line)
    while i < n and line[i] != SINGLE_QUOTE:
        token.append(line[i])
        i += 1
    if i >= n:
        return i, False
    # '' right after the closing quote keeps the token going
    if i + 1 < n and line[i + 1] == SINGLE_QUOTE:
        return i + 2, False
    return i + 1, True


def _read_double_quoted(line, i, token):
    """Copy a "..." span, collapsing its four escapes. Returns the index after the closing quote."""
    n = len(line)
    while i < n and line[i] != DOUBLE_QUOTE:
        if line[i] == BACKSLASH and i + 1 < n and line[i + 1] in DOUBLE_QUOTE_ESCAPES:
            i += 1
        token.append(line[i])
        i += 1
    if i < n:
        i += 1
    return i
