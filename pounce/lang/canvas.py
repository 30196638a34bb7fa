"""Text-mode canvas: runs a pounce program once per cell of a grid and draws the results as shaded characters.

Each cell runs 'l x y [l x y] program pounce', so the program sees its layer and coordinates as the bound names l, x
and y, and leaves the cell's intensity (a number, ideally in [-1, 1]) at the bottom of the stack.
"""

import math

from termcolor import colored

from pounce.lang.error import TypeMismatch
from pounce.lang.words import CORE_WORDS
from pounce.pure.dictionary import preprocess_defs
from pounce.pure.lexical import parse
from pounce.pure.reducer import Purr
from pounce.pure.values import Symbol, is_number

SHADES = " .:-=+*#%@"  # from no intensity to full intensity
POSITIVE = "green"
NEGATIVE = "red"

CELL_NAMES = [Symbol("l"), Symbol("x"), Symbol("y")]


def sample_cell(pl, wd, layer, x, y, max_cycles=Purr.MAX_CYCLES):
    """Runs pl for a single cell. Returns the bottom of the final stack, or None if the run fails, doesn't finish
    within max_cycles or leaves no number behind.
    """
    purr = Purr([layer, x, y, list(CELL_NAMES), list(pl), Symbol("pounce")], wd, max_cycles=max_cycles)
    try:
        snapshot = purr.resume()
    except TypeMismatch:
        return None

    if snapshot.active or not snapshot.stack or not is_number(snapshot.stack[0]):
        return None
    return snapshot.stack[0]


def sample(program, rows, columns, layers=1, wd=None, max_cycles=Purr.MAX_CYCLES):
    """Returns a rows x columns grid (list of rows) of cell values. Later layers overwrite earlier ones wherever they
    produce a value. program is program text or an already parsed program list.
    """
    if wd is None:
        wd = CORE_WORDS

    if isinstance(program, str):
        pl, wd = preprocess_defs(parse(program), wd)
    else:
        pl = list(program)

    grid = [[None] * columns for __ in range(rows)]
    for layer in range(layers):
        for y in range(rows):
            for x in range(columns):
                value = sample_cell(pl, wd, layer, x, y, max_cycles)
                if value is not None:
                    grid[y][x] = value
    return grid


def shade(value):
    """Character and color for a single cell value."""
    if value is None or math.isnan(value):
        return " ", None

    intensity = min(abs(value), 1)
    char = SHADES[round(intensity * (len(SHADES) - 1))]
    return char, POSITIVE if value >= 0 else NEGATIVE


def render(grid):
    """Renders grid as colored text, one line per row."""
    lines = []
    for row in grid:
        line = ""
        for value in row:
            char, color = shade(value)
            line += colored(char, color) if color is not None else char
        lines.append(line)
    return "\n".join(lines)
