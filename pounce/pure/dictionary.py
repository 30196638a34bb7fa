"""Word dictionaries map word names to definitions. A definition is either Native (a Python function over the stack
and the program list) or Composed (a list of values spliced onto the program list when the word is run).

Dictionaries are never changed in place. Defining words produces a new dictionary layered over the old one, so any
number of runs can share one dictionary.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from pounce.pure.values import Symbol


@dataclass(frozen=True)
class Native:
    """A word implemented in Python. fn(stack, program_list) returns (stack, program_list), or None if the word
    cannot be applied to the stack (missing or mistyped operands), leaving the stack unchanged.
    Introspective natives also receive the dictionary they were looked up in.
    """
    fn: object
    introspective: bool = False

    def __call__(self, s, pl, wd):
        if self.introspective:
            return self.fn(s, pl, wd)
        return self.fn(s, pl)

    @property
    def doc(self):
        return (self.fn.__doc__ or "").strip()


@dataclass(frozen=True)
class Composed:
    """A word defined as a list of other words and values."""
    body: list = field(default_factory=list)


class WordDictionary(Mapping):
    """Immutable name -> definition mapping. Names are unique; on extend, the newer definition wins."""

    def __init__(self, words=None):
        self._words = dict(words) if words else {}

    def extend(self, words):
        """Returns a new WordDictionary of self's words overridden by words."""
        if isinstance(words, WordDictionary):
            words = words._words
        return WordDictionary({**self._words, **words})

    def names(self):
        return sorted(self._words)

    def __getitem__(self, name):
        return self._words[name]

    def __iter__(self):
        return iter(self._words)

    def __len__(self):
        return len(self._words)

    def __repr__(self):
        return f"WordDictionary({len(self)} words)"


def _definition_at(pl, idx):
    """If pl[idx - 2:idx] is a definition ([name] [body...]), returns (name, body), otherwise None."""
    if idx < 2:
        return None

    name, body = pl[idx - 2], pl[idx - 1]
    if not isinstance(name, list) or len(name) != 1 or not isinstance(name[0], str):
        return None
    if not isinstance(body, list):
        return None
    return str(name[0]), body


def preprocess_defs(pl, wd, on_skip=None):
    """Extracts top-level '[name] [body...] compose' definitions from pl.

    Returns the program list without them and wd extended with the new words. A compose that is not preceded by a
    name list and a body list is left in place (on_skip, if given, is called with its index) and scanning goes on
    past it.
    """
    next_pl = list(pl)
    next_wd = {}

    idx = 0
    while idx < len(next_pl):
        word = next_pl[idx]
        if not (isinstance(word, Symbol) and word == "compose"):
            idx += 1
            continue

        definition = _definition_at(next_pl, idx)
        if definition is None:
            if on_skip is not None:
                on_skip(idx)
            idx += 1
            continue

        name, body = definition
        del next_pl[idx - 2:idx + 1]
        next_wd[name] = Composed(body)
        idx -= 2

    return next_pl, wd.extend(next_wd)
