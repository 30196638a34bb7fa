"""Pounce program text to program list: a memoized (packrat) recursive-descent parser.

The grammar, with whitespace being spaces, tabs, newlines, '$' and '#' comments running to the end of a line:

```
<pounce>    ::= <ws>* <value> (<ws>* <value>)* <ws>*     ; a program list, possibly empty
<value>     ::= <list> | <number> | <word> | <string> | <map>
<list>      ::= "[" <ws>* "]"
              | "[" <ws>* <value> (<ws>* <value>)* <ws>* "]"
<map>       ::= "{" <ws>* "}"
              | "{" <ws>* <pair> (<ws>* <pair>)* <ws>* "}"
<pair>      ::= <word> <ws>* ":" <ws>* <value>          ; duplicate keys: last one wins
<word>      ::= <head>+ <body>*                         ; <head> excludes '.' and '#', <body> excludes '|'
<string>    ::= "'" [^']* "'" | '"' [^"]* '"' | "`" [^`]* "`"
<number>    ::= "-"? [0-9]+ "." [0-9]+ <end_of_word>
              | "-"? "." [0-9]+ <end_of_word>
              | "-"? [0-9]+ "." <end_of_word>
              | "-"? [0-9]+ <end_of_word>
<end_of_word> ::= &(<ws> | "[" | "]" | "{" | "}" | <EOF>)
```

A word starts with one or more <head> characters, not just one, so that '||' is a single word. The same goes for
'a|b'.

Parsing happens in two phases. Reduction actions turn parse tree nodes into values while parsing, but words and
strings both come out as plain text (strings keep their quotes). Only clean_strings, run over the finished program
list, can tell them apart: it turns 'true'/'false' into booleans, number-like words into numbers, quoted text into
strings (quotes stripped) and everything else into Symbols.

Every rule caches (rule, offset) -> (result, end offset) for the duration of a parse, which keeps parsing linear in
spite of the backtracking between alternatives.
"""

import math
import re
from functools import wraps

from pounce.lang.error import PounceSyntaxError
from pounce.pure.values import QUOTES, Symbol, render_number


FAILURE = object()

WS = re.compile(r"\s|\$|#[^\n]*")
HEAD = re.compile(r"[a-zA-Z0-9|_\-+=/~!@$%^&*?<>]+")
BODY = re.compile(r"[a-zA-Z0-9_\-+=/~!@#$%^&*?.<>]*")
DIGITS = re.compile(r"[0-9]+")

FLOAT_PREFIX = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
INT_PREFIX = re.compile(r"[+-]?\d+")
INTEGER = re.compile(r"-?\d+")
INFINITIES = {"Infinity": math.inf, "-Infinity": -math.inf}  # as render_number writes them


class TreeNode:
    """A matched span of the input. elements holds the child nodes (or reduced values) of the span."""

    def __init__(self, text, offset, elements=None):
        self.text = text
        self.offset = offset
        self.elements = elements if elements is not None else []

    def __repr__(self):
        return f"TreeNode('{self.text}', {self.offset})"


class Actions:
    """Semantic reductions: each receives the input, the span of the match and the matched elements."""

    @staticmethod
    def make_pounce_pl(text, start, end, elements):
        return list(elements)

    @staticmethod
    def make_list(text, start, end, elements):
        return list(elements)

    @staticmethod
    def make_map(text, start, end, elements):
        return dict(elements)  # pairs in source order, so the last duplicate wins

    @staticmethod
    def make_pair(text, start, end, elements):
        word, value = elements
        return word, value

    @staticmethod
    def make_word(text, start, end, elements):
        return text[start:end]

    @staticmethod
    def make_string(text, start, end, elements):
        quote, = elements
        return quote + text[start + 1:end - 1] + quote

    @staticmethod
    def make_number(text, start, end, elements):
        return parse_number(text[start:end])


def memoize(rule):
    """Caches the result of rule at each offset. On failure the offset is rewound to where the rule started."""
    name = rule.__name__

    @wraps(rule)
    def read(self):
        key = (name, self.offset)
        if key in self.cache:
            result, self.offset = self.cache[key]
            return result

        start = self.offset
        result = rule(self)
        if result is FAILURE:
            self.offset = start

        self.cache[key] = (result, self.offset)
        return result

    return read


class Parser:
    """Parses one input string. A Parser is single use: create a new one per text."""

    def __init__(self, text, actions=None):
        self.text = text
        self.actions = actions if actions is not None else Actions()

        self.offset = 0
        self.cache = {}

        self.failure = 0    # furthest offset at which a terminal failed
        self.expected = []  # terminals that were tried at self.failure

    def parse(self):
        """Returns the program list, or raises a PounceSyntaxError pointing at the furthest failure."""
        tree = self._read_pounce()
        if tree is not FAILURE and self.offset == len(self.text):
            return tree

        if not self.expected:
            self.failure = self.offset
            self.expected.append("<EOF>")
        raise self.syntax_error()

    def syntax_error(self):
        """Builds the error for self.failure: line number, line text, column and expected terminals."""
        lines = self.text.split("\n")
        position = 0
        for line_num, line in enumerate(lines):
            if position + len(line) >= self.failure:
                break
            position += len(line) + 1

        expected = list(dict.fromkeys(self.expected))  # dedupe, keep order
        return PounceSyntaxError(line.rstrip(), line_num + 1, self.failure - position, expected)

    def _fail(self, label):
        """Records that label was expected at the current offset."""
        if self.offset > self.failure:
            self.failure = self.offset
            self.expected = []
        if self.offset == self.failure:
            self.expected.append(label)
        return FAILURE

    def _literal(self, chars):
        if self.text.startswith(chars, self.offset):
            node = TreeNode(chars, self.offset)
            self.offset += len(chars)
            return node
        return self._fail(f'"{chars}"')

    def _pattern(self, pattern, label):
        match = pattern.match(self.text, self.offset)
        if match is None:
            return self._fail(label)
        node = TreeNode(match.group(), self.offset)
        self.offset = match.end()
        return node

    def _skip_ws(self):
        """Consumes <ws>*. Never fails."""
        while self._read_ws() is not FAILURE:
            pass

    def _repeat(self, read, first):
        """Matches (<ws>* read)* after an initial element, rewinding over whitespace the last round consumed."""
        elements = [first]
        while True:
            start = self.offset
            self._skip_ws()
            element = read()
            if element is FAILURE:
                self.offset = start
                return elements
            elements.append(element)

    @memoize
    def _read_pounce(self):
        start = self.offset
        self._skip_ws()

        first = self._read_value()
        if first is FAILURE:
            return []  # empty program: only whitespace, if anything

        elements = self._repeat(self._read_value, first)
        self._skip_ws()
        return self.actions.make_pounce_pl(self.text, start, self.offset, elements)

    @memoize
    def _read_ws(self):
        return self._pattern(WS, "whitespace")

    @memoize
    def _read_value(self):
        for read in (self._read_list, self._read_number, self._read_word, self._read_string, self._read_map):
            value = read()
            if value is not FAILURE:
                return value
        return FAILURE

    @memoize
    def _read_list(self):
        start = self.offset
        if self._literal("[") is FAILURE:
            return FAILURE
        self._skip_ws()

        elements = []
        if self._literal("]") is FAILURE:
            first = self._read_value()
            if first is FAILURE:
                return FAILURE

            elements = self._repeat(self._read_value, first)
            self._skip_ws()
            if self._literal("]") is FAILURE:
                return FAILURE

        return self.actions.make_list(self.text, start, self.offset, elements)

    @memoize
    def _read_map(self):
        start = self.offset
        if self._literal("{") is FAILURE:
            return FAILURE
        self._skip_ws()

        elements = []
        if self._literal("}") is FAILURE:
            first = self._read_pair()
            if first is FAILURE:
                return FAILURE

            elements = self._repeat(self._read_pair, first)
            self._skip_ws()
            if self._literal("}") is FAILURE:
                return FAILURE

        return self.actions.make_map(self.text, start, self.offset, elements)

    @memoize
    def _read_pair(self):
        start = self.offset
        word = self._read_word()
        if word is FAILURE:
            return FAILURE

        self._skip_ws()
        if self._literal(":") is FAILURE:
            return FAILURE
        self._skip_ws()

        value = self._read_value()
        if value is FAILURE:
            return FAILURE
        return self.actions.make_pair(self.text, start, self.offset, [word, value])

    @memoize
    def _read_word(self):
        start = self.offset
        if self._pattern(HEAD, "word") is FAILURE:
            return FAILURE
        self._pattern(BODY, "word")
        return self.actions.make_word(self.text, start, self.offset, [])

    @memoize
    def _read_string(self):
        start = self.offset
        for quote in QUOTES:
            if self.text.startswith(quote, start):
                end = self.text.find(quote, start + 1)
                if end == -1:
                    self.offset = len(self.text)
                    return self._fail(repr(quote))

                self.offset = end + 1
                return self.actions.make_string(self.text, start, self.offset, [quote])

        return self._fail("string")

    @memoize
    def _read_number(self):
        start = self.offset
        self._literal("-")  # optional sign

        integral = self._pattern(DIGITS, "[0-9]")
        if self._literal(".") is not FAILURE:
            fraction = self._pattern(DIGITS, "[0-9]")
            if fraction is FAILURE and integral is FAILURE:
                return FAILURE
        elif integral is FAILURE:
            return FAILURE

        if self._read_end_of_word() is FAILURE:
            return FAILURE
        return self.actions.make_number(self.text, start, self.offset, [])

    def _read_end_of_word(self):
        """Lookahead only: never consumes input."""
        if self.offset >= len(self.text):
            return TreeNode("", self.offset)

        start = self.offset
        if self._read_ws() is not FAILURE:
            self.offset = start
            return TreeNode("", self.offset)

        for chars in ("[", "]", "{", "}"):
            if self._literal(chars) is not FAILURE:
                self.offset = start
                return TreeNode("", self.offset)

        return FAILURE


def number_or_none(text):
    """Reads text as a number only if nothing of text is left over: a float if the float's rendering is as long as
    text (trailing zeros, a trailing or a leading '.' are forgiven) and text has at most one '.', otherwise an integer
    under the same length test. 'Infinity' and '-Infinity' are numbers too. Returns None if text is not a number.
    """
    if text in INFINITIES:
        return INFINITIES[text]

    match = FLOAT_PREFIX.match(text)
    if match:
        num = float(match.group())
        forgiven = text[-1] in ".0" or text.lstrip("-").startswith(".")
        if (len(render_number(num)) == len(text) or forgiven) and text.count(".") <= 1:
            return int(text) if INTEGER.fullmatch(text) else num

    match = INT_PREFIX.match(text)
    if match:
        num = int(match.group())
        if len(str(num)) == len(text):
            return num

    return None


def parse_number(text):
    """Number tokens that fail the round trip test in number_or_none (e.g. '007') become NaN."""
    num = number_or_none(text)
    return num if num is not None else float("nan")


def clean_strings(pl):
    """Second parsing phase: see module docstring."""
    if isinstance(pl, list):
        return [clean_strings(value) for value in pl]
    elif isinstance(pl, dict):
        return {key: clean_strings(value) for key, value in pl.items()}
    elif isinstance(pl, str):
        if pl == "true":
            return True
        elif pl == "false":
            return False

        num = number_or_none(pl)
        if num is not None:
            return num

        if len(pl) > 1 and pl[0] == pl[-1] and pl[0] in QUOTES:
            return pl[1:-1]
        return Symbol(pl)
    return pl


def parse(text, actions=None):
    """Parses pounce program text into a program list. Raises PounceSyntaxError on malformed text."""
    return clean_strings(Parser(text + " ", actions).parse())
