"""The rewrite engine. A run is a data stack and a program list; each step takes the front of the program list and
either pushes it onto the stack (literals, lists, unknown symbols) or dispatches it (symbols naming a word). Natives
rewrite the stack and may splice new code onto the front of the program list; composed words splice their body.

Runs are resumable: resume() executes a bounded number of dispatches and suspends, so a host can spread a long run
over many calls (e.g. one per frame) or give up on it by never resuming again.
"""

from collections import deque, namedtuple

from pounce.lang.error import TypeMismatch
from pounce.pure.dictionary import Native
from pounce.pure.values import Symbol

Snapshot = namedtuple("Snapshot", ["stack", "program", "active"])


class Purr:
    """A single run of a program list against a word dictionary."""
    MAX_CYCLES = 100000

    def __init__(self, pl, wd, max_cycles=None, stack=None, error_handler=None):
        """pl is the (pre-processed) program list and wd the dictionary. max_cycles is the number of dispatches a
        resume() without a limit may perform. stack, if given, is the data stack the run starts from.
        """
        self.pl = deque(pl)
        self.wd = wd
        self.stack = list(stack) if stack else []

        self.max_cycles = max_cycles if max_cycles is not None else Purr.MAX_CYCLES
        self.error_handler = error_handler

        self.active = True
        self.cycles = 0

    def snapshot(self):
        return Snapshot(list(self.stack), list(self.pl), self.active)

    def step(self):
        """Consumes the front of the program list. Returns whether it was a dispatch (the only thing that costs a
        cycle). Raises TypeMismatch, and ends the run, if a native cannot be applied to the stack.
        """
        word = self.pl.popleft()

        if not (isinstance(word, Symbol) and word in self.wd):
            if isinstance(word, list):
                word = list(word)  # the stack never shares a list with the program
            elif isinstance(word, dict):
                word = dict(word)
            self.stack.append(word)
            return False

        definition = self.wd[word]
        if isinstance(definition, Native):
            result = definition(self.stack, self.pl, self.wd)
            if result is None:  # natives leave the stack untouched when they fail
                self.active = False
                raise TypeMismatch(word, list(self.stack))
            self.stack, self.pl = result
        else:
            self.pl.extendleft(reversed(definition.body))

        if self.error_handler is not None:
            self.error_handler.register_step(word, self.stack, self.pl)
        return True

    def resume(self, cycle_limit=None):
        """Runs until the program list is empty or cycle_limit dispatches (default: self.max_cycles) have been made,
        and returns a Snapshot. A finished run just returns its final snapshot again.
        """
        limit = cycle_limit if cycle_limit is not None else self.max_cycles

        cycles = 0
        while self.active and self.pl and cycles < limit:
            if self.step():
                cycles += 1
        self.cycles += cycles

        if not self.pl:
            self.active = False
        return self.snapshot()

    def run(self):
        """Resumes until the run finishes. Programs that never finish never return."""
        snapshot = self.resume()
        while snapshot.active:
            snapshot = self.resume()
        return snapshot

    def __iter__(self):
        """One snapshot per resume(), the last one inactive."""
        snapshot = self.resume()
        yield snapshot
        while snapshot.active:
            snapshot = self.resume()
            yield snapshot
