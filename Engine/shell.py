import sys

from Engine.builtin import dispatch_builtin
from Engine.errors import ResourceError, ShellError
from Engine.executor import ProcessOrchestrator, redirected_stream
from Engine.logger import get_logger
from Engine.parser import resolve_redirection, split_pipeline
from Engine.tokenizer import tokenize

log = get_logger("shell")


class Shell:
    """
    The read-dispatch loop.

    Each line is tokenized and split on `|`. A single command goes through
    redirection and the builtin table; several segments become a pipeline.
    `cd`, `history` and `exit` run here in the shell process, everything else
    in a forked child.
    """

    def __init__(self, session, reader, orchestrator=None):
        self.session = session
        self.reader = reader
        self.orchestrator = orchestrator or ProcessOrchestrator(session)
        self.last_status = 0

    def run(self):
        """Loop until `exit` or end of input. Returns the interpreter's exit status"""
        while True:
            line = self.reader.read()
            if line is None:
                log.debug("end of input")
                return 0
            try:
                if not self.execute(line):
                    self.save_history()
                    return 0
            except ResourceError as e:
                print(f"forkshell: fatal: {e}", file=sys.stderr)
                log.critical("cannot continue: %s", e)
                return 1

    def execute(self, line):
        """
        Run one input line.
        Returns: False when the loop should stop
        """
        if line:
            self.session.history.add(line)

        argv = tokenize(line, self.session.max_token_length)
        if not argv:
            return True

        segments = split_pipeline(line)
        try:
            if len(segments) > 1:
                handles = self.orchestrator.run_pipeline(segments)
                self.last_status = handles[-1].exit_status or 0
                return True
            return self._execute_single(argv)
        except ResourceError:
            raise
        except ShellError as e:
            print(f"forkshell: {e}", file=sys.stderr)
            self.last_status = 2
        return True

    def _execute_single(self, argv):
        argv, redirection = resolve_redirection(argv)
        name = argv[0] if argv else None

        if name == "exit":
            return False

        if name in ("cd", "history"):
            try:
                with redirected_stream(redirection, sys.stdout, sys.stderr) as (out, err):
                    self.last_status = dispatch_builtin(argv, self.session, out, err)
            except OSError as e:
                where = redirection.path if redirection is not None else name
                print(f"forkshell: {where}: {e.strerror}", file=sys.stderr)
                self.last_status = 1
            return True

        self.last_status = self.orchestrator.run_command(argv, redirection)
        return True

    def load_history(self):
        """Read the configured history file, if there is one"""
        path = self.session.history_file
        if not path:
            return
        try:
            self.session.history.read_file(path)
        except FileNotFoundError:
            log.debug("history file %s does not exist yet", path)
        except OSError as e:
            print(f"Warning: Could not load history: {e}", file=sys.stderr)

    def save_history(self):
        """Write the whole history to the configured file on `exit`"""
        path = self.session.history_file
        if not path:
            return
        try:
            self.session.history.write_file(path)
        except OSError as e:
            print(f"Warning: Could not save history: {e}", file=sys.stderr)
