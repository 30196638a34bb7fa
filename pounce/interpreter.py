"""Pounce: a concatenative, stack-based language whose interpreter is a rewrite engine over a program list.

For reference:
- "program list": the remaining program, a list of values consumed from the front
- "stack": the data stack the program operates on
- "word dictionary": word name -> native (Python) or composed (pounce) definition

Basic program flow:
    1. Parser: program text -> program list, see pounce/pure/lexical.py
    2. Pre-processing: top-level '[name] [body...] compose' triples become new words, see pounce/pure/dictionary.py
    3. Rewriting: the program list is consumed word by word, see pounce/pure/reducer.py

Example:
    >>> interpreter("5 [x] [x x *] pounce").run().stack
    [25]
"""

from pounce.lang.error import ErrorHandler
from pounce.lang.words import CORE_WORDS
from pounce.pure import lexical, values
from pounce.pure.dictionary import preprocess_defs
from pounce.pure.reducer import Purr


def parse(text):
    """Program text -> program list. Raises PounceSyntaxError on malformed text."""
    return lexical.parse(text)


def unparse(pl):
    """Program list -> program text."""
    return values.unparse(pl)


def interpreter(program, wd=None, max_cycles=Purr.MAX_CYCLES, log_level=0, error_handler=None, stack=None):
    """Returns a resumable run (a Purr) of program. program is either text, which is parsed and pre-processed first,
    or a program list, which is used as is. wd defaults to the built-in words. log_level > 0 traces every dispatch
    through error_handler (a non-fatal ErrorHandler if none is given).
    """
    if wd is None:
        wd = CORE_WORDS

    if isinstance(program, str):
        pl, wd = preprocess_defs(parse(program), wd)
    else:
        pl = list(program)

    if error_handler is None and log_level > 0:
        error_handler = ErrorHandler(fatal=False, log_level=log_level)

    return Purr(pl, wd, max_cycles=max_cycles, stack=stack, error_handler=error_handler)
