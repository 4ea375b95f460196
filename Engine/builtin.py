import io
import os
import stat

from Engine.errors import UsageError
from Engine.path_resolver import find_in_path

BUILTINS = ("type", "echo", "exit", "pwd", "cd", "history")

# Builtins that must change the shell process itself
SHELL_PROCESS_BUILTINS = ("cd", "exit", "history")

# Builtins a forked child (single command or pipeline stage) runs without exec
CHILD_BUILTINS = ("echo", "pwd", "type")


def is_builtin(name):
    return name in BUILTINS


def is_pipe(stream):
    """True when the descriptor behind `stream` is a FIFO"""
    try:
        fd = stream.fileno()
    except (AttributeError, ValueError, io.UnsupportedOperation):
        return False
    try:
        return stat.S_ISFIFO(os.fstat(fd).st_mode)
    except OSError:
        return False


def builtin_echo(args, session, out, err):
    out.write(" ".join(args))
    # no newline into a pipe, so `echo x | wc -l` style counts match
    if not is_pipe(out):
        out.write("\n")
    return 0


def builtin_type(args, session, out, err):
    """Report how each name would be run"""
    status = 0
    for name in args:
        if is_builtin(name):
            out.write(f"{name} is a shell builtin\n")
            continue
        directory = find_in_path(name, session.search_path)
        if directory is not None:
            out.write(f"{name} is {os.path.join(directory, name)}\n")
        else:
            out.write(f"{name}: not found\n")
            status = 1
    return status


def builtin_pwd(args, session, out, err):
    try:
        out.write(os.getcwd() + "\n")
    except OSError as e:
        err.write(f"pwd: error retrieving current directory: {e.strerror}\n")
        return 1
    return 0


def _cd_target(args, session):
    if len(args) > 1:
        raise UsageError("too many arguments", "cd")
    path = args[0] if args else "~"
    if path == "~" or path.startswith("~/"):
        if not session.home:
            raise UsageError("HOME not set", "cd")
        return path, session.home + path[1:]
    return path, path


def builtin_cd(args, session, out, err):
    """Change the shell's working directory"""
    try:
        shown, target = _cd_target(args, session)
    except UsageError as e:
        out.write(f"{e}\n")
        return 1
    try:
        os.chdir(target)
    except FileNotFoundError:
        out.write(f"cd: {shown}: No such file or directory\n")
        return 1
    except OSError as e:
        out.write(f"cd: {shown}: {e.strerror}\n")
        return 1
    return 0


HISTORY_FILE_FLAGS = ("-r", "-w", "-a")


def _history_request(args):
    """
    Validate `history` arguments before touching anything.
    Returns: (flag or None, filename or limit or None)
    """
    if len(args) > 2:
        raise UsageError("too many arguments", "history")
    if not args:
        return None, None

    if args[0] in HISTORY_FILE_FLAGS:
        if len(args) < 2:
            raise UsageError("filename required", f"history {args[0]}")
        return args[0], args[1]

    try:
        limit = int(args[0])
    except ValueError:
        limit = 0
    if limit <= 0:
        raise UsageError("invalid argument", "history")
    return None, limit


def builtin_history(args, session, out, err):
    """Show, load or save command history"""
    try:
        flag, value = _history_request(args)
    except UsageError as e:
        out.write(f"{e}\n")
        return 2

    history = session.history
    if flag is None:
        for line in history.show(value):
            out.write(line + "\n")
        return 0

    try:
        if flag == "-r":
            history.read_file(value)
        elif flag == "-w":
            history.write_file(value)
        else:
            history.append_file(value)
    except OSError as e:
        err.write(f"history {flag}: {value}: {e.strerror}\n")
        return 1
    return 0


HANDLERS = {
    "echo": builtin_echo,
    "type": builtin_type,
    "pwd": builtin_pwd,
    "cd": builtin_cd,
    "history": builtin_history,
}


def dispatch_builtin(argv, session, out, err, allowed=BUILTINS):
    """
    Run argv in-process if it names an allowed builtin.
    `exit` is handled by the read loop, never here.
    Returns: exit status, or None when argv is not a builtin
    """
    if not argv or argv[0] not in allowed:
        return None
    handler = HANDLERS.get(argv[0])
    if handler is None:
        return None
    return handler(argv[1:], session, out, err)
