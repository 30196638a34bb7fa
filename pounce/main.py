"""Uses the pounce interpreter to run pounce files, a single program given on the command line, a canvas rendering or
the interactive shell. Also uses error handling context manager. Called from the pounce console script.
"""

import argparse
import re

from pounce.lang import canvas
from pounce.lang.error import ErrorHandler, GenericException
from pounce.lang.session import Session
from pounce.lang.shell import Shell
from pounce.pure.reducer import Purr
from pounce.pure.values import unparse

GRID = re.compile(r"(\d+)x(\d+)")


def grid_size(arg):
    """argparse type for ROWSxCOLS."""
    match = GRID.fullmatch(arg)
    if match is None:
        raise argparse.ArgumentTypeError(f"'{arg}' is not of the form ROWSxCOLS")
    return int(match.group(1)), int(match.group(2))


def make_parser():
    parser = argparse.ArgumentParser(prog="pounce", description="Pounce, a concatenative stack-based language")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("-c", "--code", help="program to run instead of a file")
    parser.add_argument("--max-cycles", type=int, default=Purr.MAX_CYCLES,
                        help="word dispatches a run may make before it is stopped (default: %(default)s)")
    parser.add_argument("--log-level", type=int, default=0,
                        help="1 traces every dispatch with its stack, 2 also shows the program list")
    parser.add_argument("--grid", type=grid_size, metavar="ROWSxCOLS",
                        help="render the program as a canvas of the given size instead of printing its stack")
    parser.add_argument("--layers", type=int, default=1, help="canvas layers (default: %(default)s)")
    return parser


def main(argv=None):
    """Runs pounce interpreter. Called from pounce console script."""
    with ErrorHandler() as error_handler:
        args = make_parser().parse_args(argv)
        error_handler.log_level = args.log_level

        if args.file is not None and args.code is not None:
            raise GenericException("give either a file or '{}', not both", "-c", diagnosis=False)

        if args.grid is not None:
            if args.code is not None:
                program = args.code
            elif args.file is not None:
                try:
                    with open(args.file, "r") as file:
                        program = file.read()
                except OSError:
                    raise GenericException("'{}' could not be opened", args.file, diagnosis=False)
            else:
                raise GenericException("'{}' needs a file or -c", "--grid", diagnosis=False)

            rows, columns = args.grid
            print(canvas.render(canvas.sample(program, rows, columns, args.layers, max_cycles=args.max_cycles)))

        elif args.file is not None or args.code is not None:
            if args.code is not None:
                sess = Session(error_handler, Session.SH_FILE, True, args.max_cycles, args.log_level)
                error_handler.fatal = True
                sess.add(args.code, 1)
            else:
                sess = Session(error_handler, args.file, False, args.max_cycles, args.log_level)
            sess.run()

            for stack in sess.results:
                print(unparse(stack))

        else:
            Shell(Session(error_handler, Session.SH_FILE, True, args.max_cycles, args.log_level)).cmdloop()


if __name__ == "__main__":
    main()
