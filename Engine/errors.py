"""
Shell error hierarchy.

    ShellError
    ├── RedirectionError   malformed redirection, reported and skipped
    ├── PipelineError      empty pipeline stage, reported and skipped
    ├── UsageError         bad builtin arguments, reported and skipped
    └── ResourceError      fork/pipe failure, fatal to the interpreter
"""


class ShellError(Exception):
    """Base class for errors raised by the execution engine."""

    def __init__(self, message, command=None):
        super().__init__(message)
        self.message = message
        self.command = command

    def __str__(self):
        if self.command:
            return f"{self.command}: {self.message}"
        return self.message


class RedirectionError(ShellError):
    """Raised when a redirection operator has no target file."""


class PipelineError(ShellError):
    """Raised when a pipeline has a stage with no command."""


class UsageError(ShellError):
    """Raised when a builtin receives arguments it cannot accept."""


class ResourceError(ShellError):
    """Raised when the OS refuses to create a process or a pipe."""
