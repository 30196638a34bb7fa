"""Values that flow through a pounce program: numbers, strings, booleans, symbols, lists and mappings.

Lists are both data and code. A list met in program position is pushed onto the stack (as a copy), and the very same
list can be spliced back into the program list to be executed. Symbols are the only values ever looked up in a word
dictionary; a Symbol that names no word is just data (a placeholder).
"""

import math
from copy import deepcopy


class Symbol(str):
    """An unquoted identifier. Compares and hashes like the str it wraps."""

    def __repr__(self):
        return f"Symbol({str.__repr__(self)})"


QUOTES = ['"', "'", "`"]


def is_number(value):
    """bool is an int subclass in Python, but never a pounce number."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_num_or_none(value):
    return value if is_number(value) else None


def to_list_or_none(value):
    return value if isinstance(value, list) else None


def to_str_or_none(value):
    return value if isinstance(value, str) else None


def to_bool_or_none(value):
    return value if isinstance(value, bool) else None


def pop(stack):
    """Pops the top of stack, or returns None if stack is empty."""
    return stack.pop() if stack else None


def peek(stack):
    """Returns the top of stack without removing it, or None if stack is empty."""
    return stack[-1] if stack else None


def clone(value):
    """Deep copy of a value, so that a duplicate never shares a list with its original."""
    if isinstance(value, (list, dict)):
        return deepcopy(value)
    return value


def render_number(num):
    """Renders num the way it is written in program text: integral floats lose their fractional part."""
    if isinstance(num, int):
        return str(num)
    if math.isnan(num):
        return "NaN"
    if math.isinf(num):
        return "Infinity" if num > 0 else "-Infinity"
    if num.is_integer() and abs(num) < 1e21:
        return str(int(num))
    return repr(num)


def render_string(text):
    """Wraps text in the first quote character it does not contain."""
    for quote in QUOTES:
        if quote not in text:
            return f"{quote}{text}{quote}"
    return f'"{text}"'  # no quote left, cannot round trip


def render(value):
    """Renders a single value as program text."""
    if isinstance(value, bool):
        return "true" if value else "false"
    elif is_number(value):
        return render_number(value)
    elif isinstance(value, Symbol):
        return str(value)
    elif isinstance(value, str):
        return render_string(value)
    elif isinstance(value, list):
        return f"[{unparse(value)}]"
    elif isinstance(value, dict):
        return "{" + " ".join(f"{key}:{render(item)}" for key, item in value.items()) + "}"
    return str(value)


def unparse(pl):
    """Renders a program list as program text. parse(unparse(pl)) gives back pl for strings without quotes in them."""
    return " ".join(render(value) for value in pl)


def equal(a, b):
    """Equality as seen by the comparison words: lists and mappings are equal when they render the same."""
    if is_number(a) and is_number(b):
        return a == b
    if isinstance(a, str) and isinstance(b, str):
        return str(a) == str(b)
    if isinstance(a, bool) and isinstance(b, bool):
        return a == b
    if isinstance(a, (list, dict)) and isinstance(b, (list, dict)):
        return render(a) == render(b)
    return False
