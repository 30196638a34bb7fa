"""Session control for the pounce language: loads programs from a file or from the command line, extracts their
definitions into the session's word dictionary and runs them.
"""

from pounce.lang.error import GenericException, PounceSyntaxError
from pounce.lang.words import CORE_WORDS
from pounce.pure.dictionary import preprocess_defs
from pounce.pure.lexical import parse
from pounce.pure.reducer import Purr
from pounce.pure.values import QUOTES, unparse


class Session:
    """Governs a pounce session, with control over the session's words and (in command-line mode) its stack."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line, max_cycles=Purr.MAX_CYCLES, log_level=0, wd=None):
        self.error_handler = error_handler
        self.error_handler.register_file(path)
        self.error_handler.log_level = log_level

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.max_cycles = max_cycles
        self.log_level = log_level

        self.wd = wd if wd is not None else CORE_WORDS  # grows with every definition added
        self.stack = []    # carried over between lines in command-line mode
        self.to_run = []   # list of (line num, source line, program list) to run
        self.results = []  # final stacks of runs, oldest first

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    text = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            self.add(text, 1)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line):
        """Returns line and whether it needs a continuation: a '[' or '{' left open or a string left unterminated.
        Brackets inside strings and comments don't count.
        """
        depth = 0
        quote = None
        comment = False
        prev = " "

        for char in line:
            if comment:
                comment = char != "\n"
            elif quote is not None:
                if char == quote:
                    quote = None
            elif char in QUOTES:
                quote = char
            elif char == "#" and (prev.isspace() or prev in "[]{}$"):
                comment = True
            elif char in "[{":
                depth += 1
            elif char in "]}":
                depth -= 1
            prev = char

        return line, depth > 0 or quote is not None

    def add(self, expr, line_num):
        """Parses expr, adds its definitions to the session's words and queues the rest to be run. Running is delayed
        until run is called. Programs read from a file are not tied to a single line for error messages.
        """
        source = expr.strip() if self.cmd_line else None
        self.error_handler.register_line(self.path, source, line_num)  # in case error is raised

        try:
            pl = parse(expr)
        except PounceSyntaxError as error:
            self.error_handler.register_line(self.path, error.text, line_num + error.lineno - 1)
            raise

        pl, self.wd = preprocess_defs(pl, self.wd, on_skip=self._skipped_compose)

        self.error_handler.remove_line(self.path)  # error was not raised
        if pl:
            self.to_run.append((line_num, source, pl))

    def _skipped_compose(self, idx):
        self.error_handler.warn("'{}' needs a [name] and a [body] before it and was left in place", "compose")

    def run(self):
        """Runs the queued programs in order. Will raise any errors that are encountered."""
        while self.to_run:
            line_num, source, pl = self.to_run.pop(0)
            self.error_handler.register_line(self.path, source, line_num)

            error_handler = self.error_handler if self.log_level > 0 else None
            purr = Purr(pl, self.wd, max_cycles=self.max_cycles, stack=self.stack, error_handler=error_handler)

            snapshot = purr.resume()
            if snapshot.active:
                self.error_handler.warn("run stopped after {} cycles", str(self.max_cycles), diagnosis=False)

            self.results.append(snapshot.stack)
            if self.cmd_line:
                self.stack = snapshot.stack

            self.error_handler.remove_line(self.path)

    def pop(self):
        """Removes and returns the latest result, rendered as program text."""
        return unparse(self.results.pop())
