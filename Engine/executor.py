import logging
import os
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import List, Optional, Tuple

import psutil

from Engine.builtin import CHILD_BUILTINS, dispatch_builtin
from Engine.errors import PipelineError, ResourceError
from Engine.logger import get_logger
from Engine.parser import STDERR, STDOUT, RedirectionSpec, resolve_redirection
from Engine.path_resolver import find_in_path
from Engine.tokenizer import tokenize

log = get_logger("executor")

FILE_MODE = 0o644

EXIT_FAILURE = 1
EXIT_EXEC_FAILED = 126
EXIT_NOT_FOUND = 127


@dataclass
class ProcessHandle:
    """A spawned child, owned by its spawner until reaped."""
    pid: int
    argv: List[str]
    exit_status: Optional[int] = None


@dataclass
class StreamBindings:
    """How a child's standard streams are wired before it runs."""
    stdin: Optional[int] = None
    stdout: Optional[int] = None
    redirection: Optional[RedirectionSpec] = None
    close_fds: Tuple[int, ...] = ()
    # where "command not found" is reported; pipeline stages use stderr
    not_found_stream: int = STDOUT


class PipeSet:
    """
    The N-1 pipe pairs joining N pipeline stages.

    Pair i carries stage i's output into stage i+1. Every endpoint still
    open when the `with` block ends is closed, on error paths too.
    """

    def __init__(self, stages):
        self.count = max(stages - 1, 0)
        self.pairs = []
        self._open = set()

    def __enter__(self):
        try:
            for _ in range(self.count):
                read_fd, write_fd = os.pipe()
                self.pairs.append((read_fd, write_fd))
                self._open.update((read_fd, write_fd))
        except OSError as e:
            self.close_all()
            raise ResourceError(f"pipe: {e.strerror}") from e
        log.debug("created %d pipe pairs: %s", self.count, self.pairs)
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close_all()
        return False

    def descriptors(self):
        return tuple(fd for pair in self.pairs for fd in pair)

    def bindings_for(self, stage, redirection=None):
        """Stage i reads pair i-1 and writes pair i, and closes every endpoint"""
        stdin = self.pairs[stage - 1][0] if stage > 0 else None
        stdout = self.pairs[stage][1] if stage < self.count else None
        return StreamBindings(stdin, stdout, redirection, self.descriptors(), not_found_stream=STDERR)

    def close_all(self):
        while self._open:
            os.close(self._open.pop())


def open_descriptor_count():
    """Descriptors currently open in this process"""
    return psutil.Process().num_fds()


def _flush_std_streams():
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (AttributeError, ValueError, OSError):
            pass


def _open_target(spec):
    return os.open(spec.path, spec.flags, FILE_MODE)


@contextmanager
def redirected_stream(spec, out, err):
    """
    Streams for a builtin running inside the shell process.
    Yields: (out, err) with the redirected one replaced by the target file
    """
    if spec is None:
        yield out, err
        return
    with open(_open_target(spec), "w", encoding="utf-8") as target:
        if spec.stream == STDOUT:
            yield target, err
        else:
            yield out, target


class ProcessOrchestrator:
    """Forks, wires and reaps the processes of one input line."""

    def __init__(self, session):
        self.session = session

    def resolve(self, name):
        """Absolute path to exec for `name`, or None"""
        if "/" in name:
            return name
        directory = find_in_path(name, self.session.search_path)
        if directory is None:
            return None
        return os.path.join(directory, name)

    def spawn(self, argv, environment, bindings):
        """
        Fork a child that runs argv with the given stream wiring.
        Returns: ProcessHandle for the parent; the child never returns
        """
        _flush_std_streams()
        try:
            pid = os.fork()
        except OSError as e:
            raise ResourceError(f"fork: {e.strerror}") from e

        if pid == 0:
            self._run_child(argv, environment, bindings)

        log.debug("spawned pid %d for %r (stdin=%s stdout=%s)", pid, argv, bindings.stdin, bindings.stdout)
        return ProcessHandle(pid, list(argv))

    def wait(self, handle):
        """Block until one child exits. Returns its exit status"""
        while True:
            try:
                _, status = os.waitpid(handle.pid, 0)
                break
            except KeyboardInterrupt:
                # the child got the same SIGINT; keep waiting for it
                continue
        handle.exit_status = os.waitstatus_to_exitcode(status)
        log.debug("reaped pid %d with status %d", handle.pid, handle.exit_status)
        return handle.exit_status

    def wait_all(self, handles):
        """Reap every handle, in whatever order the children finish"""
        pending = {h.pid: h for h in handles if h.exit_status is None}
        while pending:
            try:
                pid, status = os.wait()
            except KeyboardInterrupt:
                continue
            except ChildProcessError:
                log.warning("no children left, %d handles unreaped", len(pending))
                break
            handle = pending.pop(pid, None)
            if handle is not None:
                handle.exit_status = os.waitstatus_to_exitcode(status)
                log.debug("reaped pid %d with status %d", pid, handle.exit_status)
        return [h.exit_status for h in handles]

    def run_command(self, argv, redirection=None):
        """Run one non-piped command in a child and wait for it"""
        handle = self.spawn(argv, self.session.environment, StreamBindings(redirection=redirection))
        return self.wait(handle)

    def run_pipeline(self, segments):
        """
        Run N >= 2 segments connected by pipes.
        Returns: list of ProcessHandle, all reaped
        """
        stages = []
        for segment in segments:
            argv = tokenize(segment, self.session.max_token_length)
            if not argv:
                raise PipelineError("syntax error near unexpected token `|'")
            stages.append(resolve_redirection(argv))

        handles = []
        try:
            with PipeSet(len(stages)) as pipes:
                for i, (argv, redirection) in enumerate(stages):
                    bindings = pipes.bindings_for(i, redirection)
                    handles.append(self.spawn(argv, self.session.environment, bindings))
                pipes.close_all()
        finally:
            # with every endpoint closed in the parent, each stage sees EOF and exits
            self.wait_all(handles)

        if log.isEnabledFor(logging.DEBUG):
            log.debug("pipeline of %d stages done, %d descriptors open", len(handles), open_descriptor_count())
        return handles

    # -- child side --

    def _run_child(self, argv, environment, bindings):
        status = EXIT_FAILURE
        try:
            status = self._child_main(argv, environment, bindings)
        except Exception:
            log.exception("child %d failed running %r", os.getpid(), argv)
        finally:
            _flush_std_streams()
            os._exit(status)

    def _child_main(self, argv, environment, bindings):
        if bindings.stdin is not None:
            os.dup2(bindings.stdin, 0)
        if bindings.stdout is not None:
            os.dup2(bindings.stdout, 1)
        for fd in bindings.close_fds:
            os.close(fd)

        # fresh streams on the rebound descriptors
        sys.stdout = open(1, "w", encoding="utf-8", errors="surrogateescape", closefd=False)
        sys.stderr = open(2, "w", encoding="utf-8", errors="surrogateescape", closefd=False)

        spec = bindings.redirection
        if spec is not None:
            try:
                fd = _open_target(spec)
            except OSError as e:
                sys.stderr.write(f"forkshell: {spec.path}: {e.strerror}\n")
                return EXIT_FAILURE
            os.dup2(fd, spec.stream)
            os.close(fd)

        if not argv:
            return 0

        status = dispatch_builtin(argv, self.session, sys.stdout, sys.stderr, allowed=CHILD_BUILTINS)
        if status is not None:
            return status

        path = self.resolve(argv[0])
        if path is None:
            report = sys.stdout if bindings.not_found_stream == STDOUT else sys.stderr
            report.write(f"{argv[0]}: command not found\n")
            return EXIT_NOT_FOUND

        _flush_std_streams()
        try:
            os.execve(path, argv, environment)
        except OSError as e:
            sys.stderr.write(f"{argv[0]}: {e.strerror}\n")
        return EXIT_EXEC_FAILED
