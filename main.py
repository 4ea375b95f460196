import sys

import config
from Engine.logger import setup_logging
from Engine.prompt import LineReader
from Engine.session import Session
from Engine.shell import Shell


def main():
    setup_logging(config.LOG_LEVEL, config.LOG_FILE)

    session = Session.from_environ()
    reader = LineReader(session)
    reader.setup()

    shell = Shell(session, reader)
    shell.load_history()
    return shell.run()


if __name__ == "__main__":
    sys.exit(main())
