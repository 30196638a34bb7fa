"""Built-in words of the pounce language.

Natives are Python functions taking (stack, program list) and returning (stack, program list), or None when their
operands are missing or of the wrong type, in which case the stack is left as it was. The docstring of each native
is its stack effect, shown by the word word.

Composed words are written in pounce itself and parsed once, at import. Recursion and iteration (times, map, filter,
reduce, the *rec family) never loop in Python: they splice new program fragments, including a call to themselves,
onto the front of the program list.
"""

import math

from pounce.lang import numerical
from pounce.pure.binding import bind, crouch, pounce
from pounce.pure.dictionary import Composed, Native, WordDictionary
from pounce.pure.lexical import parse
from pounce.pure.values import (Symbol, clone, equal, is_number, peek, to_bool_or_none, to_list_or_none, to_num_or_none,
                                to_str_or_none)


TYPE_NAMES = ["Nat", "Zero", "Str", "Neg", "Bool", "Map"]


def _take(s, *coercers):
    """Pops one operand per coercer (the last coercer gets the top of the stack) and returns them bottom first, or
    None if the stack is too short or an operand does not coerce.
    """
    if len(s) < len(coercers):
        return None

    operands = []
    for coercer, value in zip(coercers, s[len(s) - len(coercers):]):
        operand = coercer(value)
        if operand is None:
            return None
        operands.append(operand)

    del s[len(s) - len(coercers):]
    return operands


def _any(value):
    return value


def _splice(pl, block):
    """Lists run as code; anything else is put back at the front of the program as a single item."""
    if isinstance(block, list):
        pl.extendleft(reversed(block))
    else:
        pl.appendleft(block)


def dup(s, pl):
    """A -> A A"""
    if not s:
        return None
    s.append(clone(s[-1]))
    return s, pl


def swap(s, pl):
    """A B -> B A"""
    operands = _take(s, _any, _any)
    if operands is None:
        return None
    a, b = operands
    s.extend([b, a])
    return s, pl


def drop(s, pl):
    """A ->"""
    if not s:
        return None
    s.pop()
    return s, pl


def depth(s, pl):
    """-> N (number of items on the stack)"""
    s.append(len(s))
    return s, pl


def stack_copy(s, pl):
    """-> [stack]"""
    s.append(list(s))
    return s, pl


def _arithmetic(op, doc, nonzero=False):
    def native(s, pl):
        operands = _take(s, to_num_or_none, to_num_or_none)
        if operands is None:
            return None

        a, b = operands
        if nonzero and b == 0:
            s.extend([a, b])
            return None

        s.append(op(a, b))
        return s, pl

    native.__doc__ = doc
    return native


def round_(s, pl):
    """N places -> N rounded to places decimal places"""
    operands = _take(s, to_num_or_none, to_num_or_none)
    if operands is None:
        return None

    a, b = operands
    if not math.isfinite(b):
        s.extend([a, b])
        return None

    s.append(numerical.round_to(a, b))
    return s, pl


def _bitwise(op, doc):
    def native(s, pl):
        operands = _take(s, to_num_or_none, to_num_or_none)
        if operands is None:
            return None
        a, b = operands
        s.append(numerical.int32(op(numerical.int32(a), numerical.int32(b))))
        return s, pl

    native.__doc__ = doc
    return native


def invert(s, pl):
    """N -> ~N (32 bit)"""
    operands = _take(s, to_num_or_none)
    if operands is None:
        return None
    a, = operands
    s.append(numerical.int32(~numerical.int32(a)))
    return s, pl


def _logical(op, doc):
    def native(s, pl):
        operands = _take(s, to_bool_or_none, to_bool_or_none)
        if operands is None:
            return None
        a, b = operands
        s.append(op(a, b))
        return s, pl

    native.__doc__ = doc
    return native


def not_(s, pl):
    """B -> !B"""
    operands = _take(s, to_bool_or_none)
    if operands is None:
        return None
    a, = operands
    s.append(not a)
    return s, pl


def _constant(value, doc):
    def native(s, pl):
        s.append(value)
        return s, pl

    native.__doc__ = doc
    return native


def _float_op(fn, *args):
    """Calls a math function the forgiving way: domain errors give NaN, overflow gives an infinity."""
    try:
        return fn(*args)
    except ValueError:
        return math.nan
    except OverflowError:
        return math.inf
    except ZeroDivisionError:
        return math.inf


def _unary(fn, doc):
    def native(s, pl):
        operands = _take(s, to_num_or_none)
        if operands is None:
            return None
        a, = operands
        s.append(_float_op(fn, a))
        return s, pl

    native.__doc__ = doc
    return native


def _binary(fn, doc):
    def native(s, pl):
        operands = _take(s, to_num_or_none, to_num_or_none)
        if operands is None:
            return None
        b, a = operands  # a is the top of the stack
        s.append(_float_op(fn, b, a))
        return s, pl

    native.__doc__ = doc
    return native


def _sign(a):
    if math.isnan(a):
        return a
    return (a > 0) - (a < 0)


def _cbrt(a):
    return math.copysign(abs(a) ** (1 / 3), a)


def _pow(b, a):
    if b == 0 and a < 0:
        return math.inf
    result = math.pow(b, a)
    return int(result) if isinstance(b, int) and isinstance(a, int) and a >= 0 else result


def _pole(fn, at):
    """Logarithms go to -Infinity at their pole rather than failing."""
    return lambda a: -math.inf if a == at else fn(a)


def _atanh(a):
    return math.copysign(math.inf, a) if abs(a) == 1 else math.atanh(a)


def _rounding(fn):
    """ceil/floor/trunc keep NaN and infinities instead of raising."""
    return lambda a: fn(a) if math.isfinite(a) else a


def _make_random(rng):
    def seedrandom(s, pl):
        """N|S ->  (seeds random)"""
        seed = peek(s)
        if not is_number(seed) and to_str_or_none(seed) is None:
            return None
        rng.seed(s.pop())
        return s, pl

    def random_(s, pl):
        """-> N in [0, 1)"""
        s.append(rng.next())
        return s, pl

    return seedrandom, random_


def leap(s, pl):
    """[F] -> F run"""
    if not s:
        return None
    _splice(pl, s.pop())
    return s, pl


def dip(s, pl):
    """A [F] -> F run A"""
    operands = _take(s, _any, _any)
    if operands is None:
        return None
    item, block = operands
    pl.appendleft(item)
    _splice(pl, block)
    return s, pl


def dip2(s, pl):
    """A B [F] -> F run A B"""
    operands = _take(s, _any, _any, _any)
    if operands is None:
        return None
    item1, item2, block = operands
    pl.extendleft([item2, item1])
    _splice(pl, block)
    return s, pl


def if_else(s, pl):
    """B [then] [else] -> then run if B, else run otherwise"""
    operands = _take(s, to_bool_or_none, to_list_or_none, to_list_or_none)
    if operands is None:
        return None
    condition, then_block, else_block = operands
    _splice(pl, then_block if condition else else_block)
    return s, pl


def linrec(s, pl):
    """[termtest] [terminal] [recurse] [final] -> linear recursion"""
    operands = _take(s, *[to_list_or_none] * 4)
    if operands is None:
        return None
    termtest, terminal, recurse, final = operands

    next_rec = [termtest, terminal, recurse, final, Symbol("linrec")] + final
    _splice(pl, termtest + [terminal, recurse + next_rec, Symbol("if-else")])
    return s, pl


def linrec5(s, pl):
    """[init] [termtest] [terminal] [recurse] [final] -> init run, then linear recursion"""
    operands = _take(s, *[to_list_or_none] * 5)
    if operands is None:
        return None
    init, termtest, terminal, recurse, final = operands

    next_rec = [termtest, terminal, recurse, final, Symbol("linrec")] + final
    _splice(pl, init + termtest + [terminal, recurse + next_rec, Symbol("if-else")])
    return s, pl


def binrec(s, pl):
    """[termtest] [terminal] [recurse] [final] -> binary recursion"""
    operands = _take(s, *[to_list_or_none] * 4)
    if operands is None:
        return None
    termtest, terminal, recurse, final = operands

    next_rec = [termtest, terminal, recurse, final, Symbol("binrec")]
    _splice(pl, termtest + [terminal, recurse + [list(next_rec), Symbol("dip")] + next_rec + final, Symbol("if-else")])
    return s, pl


def constrec(s, pl):
    """[initial] [increment] [condition] [recurse] [final] -> construction by recursion"""
    operands = _take(s, *[to_list_or_none] * 5)
    if operands is None:
        return None
    initial, increment, condition, recurse, final = operands

    next_rec = [[], increment, condition, recurse, final, Symbol("constrec")]
    _splice(pl, initial + increment + condition + [recurse + next_rec, final, Symbol("if-else")])
    return s, pl


def equal_keep(s, pl):
    """A B -> A (A = B)"""
    if len(s) < 2:
        return None
    b = s.pop()
    s.append(equal(s[-1], b))
    return s, pl


def equal_(s, pl):
    """A B -> (A == B)"""
    operands = _take(s, _any, _any)
    if operands is None:
        return None
    s.append(equal(*operands))
    return s, pl


def not_equal(s, pl):
    """A B -> (A != B)"""
    operands = _take(s, _any, _any)
    if operands is None:
        return None
    s.append(not equal(*operands))
    return s, pl


def _ordering(op, doc):
    def native(s, pl):
        if len(s) < 2:
            return None

        a, b = s[-2], s[-1]
        if is_number(a) and is_number(b):
            result = op(a, b)
        elif isinstance(a, str) and isinstance(b, str):
            result = op(str(a), str(b))
        else:
            return None

        del s[-2:]
        s.append(result)
        return s, pl

    native.__doc__ = doc
    return native


def concat(s, pl):
    """[A*] [B*] -> [A* B*]"""
    operands = _take(s, to_list_or_none, to_list_or_none)
    if operands is None:
        return None
    a, b = operands
    s.append(a + b)
    return s, pl


def cons(s, pl):
    """A [B*] -> [A B*]"""
    operands = _take(s, _any, to_list_or_none)
    if operands is None:
        return None
    a, b = operands
    s.append([a] + b)
    return s, pl


def uncons(s, pl):
    """[A B*] -> A [B*]"""
    arr = to_list_or_none(peek(s))
    if not arr:
        return None
    s.pop()
    s.extend([arr[0], arr[1:]])
    return s, pl


def push(s, pl):
    """[A*] B -> [A* B]"""
    operands = _take(s, to_list_or_none, _any)
    if operands is None:
        return None
    arr, item = operands
    s.append(arr + [item])
    return s, pl


def pop_(s, pl):
    """[A* B] -> [A*] B"""
    arr = to_list_or_none(peek(s))
    if not arr:
        return None
    s.pop()
    s.extend([arr[:-1], arr[-1]])
    return s, pl


def size(s, pl):
    """[A*] -> [A*] N"""
    arr = to_list_or_none(peek(s))
    if arr is None:
        return None
    s.append(len(arr))
    return s, pl


def _index_or_none(value, length):
    if not is_number(value) or not float(value).is_integer() or not 0 <= value < length:
        return None
    return int(value)


def out_at(s, pl):
    """[A*] I -> [A*] A[I]   (also for strings)"""
    if len(s) < 2:
        return None
    seq, i = s[-2], s[-1]
    if not isinstance(seq, (list, str)):
        return None

    idx = _index_or_none(i, len(seq))
    if idx is None:
        return None

    s.pop()
    s.append(seq[idx] if isinstance(seq, list) else str(seq)[idx])
    return s, pl


def in_at(s, pl):
    """[A*] B I -> [A*] with B at I"""
    if len(s) < 3:
        return None
    arr, ele, i = s[-3:]
    if not isinstance(arr, list):
        return None

    idx = _index_or_none(i, len(arr))
    if idx is None:
        return None

    del s[-3:]
    arr = list(arr)
    arr[idx] = ele
    s.append(arr)
    return s, pl


def words(s, pl, wd):
    """-> [names of all words]"""
    s.append([Symbol(name) for name in wd.names()])
    return s, pl


def word(s, pl, wd):
    """[name] -> {description of the word}"""
    phrase = to_list_or_none(peek(s))
    if not phrase or not isinstance(phrase[0], str) or phrase[0] not in wd:
        return None

    s.pop()
    definition = wd[phrase[0]]
    if isinstance(definition, Composed):
        s.append({"compose": clone(definition.body)})
    else:
        s.append({"native": definition.doc})
    return s, pl


def type_of(s, pl):
    """A -> type name of A   (lists are mapped over)"""
    if not s:
        return None

    item = s[-1]
    if isinstance(item, bool):
        name = "Bool"
    elif is_number(item):
        if math.isnan(item):
            return None
        name = "Nat" if item >= 0 else "Neg"
    elif isinstance(item, str):
        if item in TYPE_NAMES:
            name = "Type"
        elif item == "Type":
            name = "MetaType"
        else:
            name = "Str"
    elif isinstance(item, dict):
        name = "Map"
    else:
        s.pop()
        pl.extendleft([Symbol("map"), [Symbol("type-of")], item])
        return s, pl

    s.pop()
    s.append(name)
    return s, pl


def is_a_type(s, pl):
    """A -> whether A names a type   (lists are mapped over)"""
    if not s:
        return None

    item = s.pop()
    if isinstance(item, list):
        pl.extendleft([Symbol("map"), [Symbol("is-a-type")], item])
    else:
        s.append(isinstance(item, str) and item in TYPE_NAMES)
    return s, pl


COMPOSED = {
    "dup2": "[dup] dip dup [swap] dip",
    "rotate": "swap [swap] dip swap",
    "rollup": "swap [swap] dip",
    "rolldown": "[swap] dip swap",
    "ifte": "[leap] dip2 if-else",
    "run": "leap",
    "times": "dup 0 > [1 - swap dup dip2 swap times] [drop drop] if-else",
    "map": """
        [list phrase] [
            [[] list] [size 0 <=] [drop]
            [uncons [swap [phrase leap] dip swap push] dip]
            [] linrec5
        ] pounce""",
    "map2": """
        [list phrase] [
            [[] list] [size 1 <=] [drop]
            [uncons uncons [phrase leap push] dip]
            [] linrec5
        ] pounce""",
    "filter": """
        [list phrase] [
            [[] list] [size 0 <=] [drop]
            [uncons [swap [dup phrase leap] dip rollup [push] [drop] if-else] dip]
            [] linrec5
        ] pounce""",
    "reduce": """
        [_list _acc _phrase] [
            [_acc _list] [size 0 <=] [drop]
            [uncons [_phrase leap] dip]
            [] linrec5
        ] pounce""",
    "split": """
        [cutVal theList operator] [
            theList cutVal operator cons [!] concat filter cutVal push
            theList cutVal operator cons filter
        ] pounce""",
    "spliti": """
        [theList cutValIndex operator] [
            theList cutValIndex outAt operator cons [!] concat filter
            theList cutValIndex outAt operator cons filter
        ] pounce""",
}


def build_core_words(rng=None):
    """Returns the built-in WordDictionary. rng is the SeededRandom behind seedrandom/random (a fresh one if None)."""
    seedrandom, random_ = _make_random(rng if rng is not None else numerical.SeededRandom())

    natives = {
        "dup": dup,
        "swap": swap,
        "drop": drop,
        "depth": depth,
        "stack-copy": stack_copy,

        "+": _arithmetic(numerical.plus, "N N -> N"),
        "-": _arithmetic(numerical.minus, "N N -> N"),
        "*": _arithmetic(numerical.times, "N N -> N"),
        "/": _arithmetic(numerical.divide, "N N -> N   (divisor != 0)", nonzero=True),
        "%": _arithmetic(numerical.remainder, "N N -> N   (divisor != 0)", nonzero=True),
        "round": round_,

        "&": _bitwise(lambda a, b: a & b, "N N -> N (32 bit and)"),
        "|": _bitwise(lambda a, b: a | b, "N N -> N (32 bit or)"),
        "^": _bitwise(lambda a, b: a ^ b, "N N -> N (32 bit xor)"),
        "~": invert,
        "&&": _logical(lambda a, b: a and b, "B B -> B"),
        "||": _logical(lambda a, b: a or b, "B B -> B"),
        "!": not_,

        "E": _constant(math.e, "-> e"),
        "LN10": _constant(math.log(10), "-> ln 10"),
        "LN2": _constant(math.log(2), "-> ln 2"),
        "LOG10E": _constant(math.log10(math.e), "-> log10 e"),
        "LOG2E": _constant(math.log2(math.e), "-> log2 e"),
        "PI": _constant(math.pi, "-> pi"),
        "SQRT1_2": _constant(math.sqrt(0.5), "-> sqrt 1/2"),
        "SQRT2": _constant(math.sqrt(2), "-> sqrt 2"),

        "abs": _unary(abs, "N -> |N|"),
        "acos": _unary(math.acos, "N -> acos N"),
        "acosh": _unary(math.acosh, "N -> acosh N"),
        "asin": _unary(math.asin, "N -> asin N"),
        "asinh": _unary(math.asinh, "N -> asinh N"),
        "atan": _unary(math.atan, "N -> atan N"),
        "atan2": _binary(math.atan2, "Y X -> atan2(Y, X)"),
        "atanh": _unary(_atanh, "N -> atanh N"),
        "cbrt": _unary(_cbrt, "N -> cube root of N"),
        "ceil": _unary(_rounding(math.ceil), "N -> ceil N"),
        "cos": _unary(math.cos, "N -> cos N"),
        "cosh": _unary(math.cosh, "N -> cosh N"),
        "exp": _unary(math.exp, "N -> e ** N"),
        "expm1": _unary(math.expm1, "N -> e ** N - 1"),
        "floor": _unary(_rounding(math.floor), "N -> floor N"),
        "hypot": _unary(abs, "N -> hypot N"),
        "log": _unary(_pole(math.log, 0), "N -> ln N"),
        "log10": _unary(_pole(math.log10, 0), "N -> log10 N"),
        "log1p": _unary(_pole(math.log1p, -1), "N -> ln (1 + N)"),
        "log2": _unary(_pole(math.log2, 0), "N -> log2 N"),
        "max": _binary(max, "N N -> max"),
        "min": _binary(min, "N N -> min"),
        "pow": _binary(_pow, "B X -> B ** X"),
        "sign": _unary(_sign, "N -> -1, 0 or 1"),
        "sin": _unary(math.sin, "N -> sin N"),
        "sinh": _unary(math.sinh, "N -> sinh N"),
        "sqrt": _unary(math.sqrt, "N -> sqrt N"),
        "tan": _unary(math.tan, "N -> tan N"),
        "tanh": _unary(math.tanh, "N -> tanh N"),
        "trunc": _unary(_rounding(math.trunc), "N -> N truncated"),
        "seedrandom": seedrandom,
        "random": random_,

        "leap": leap,
        "crouch": crouch,
        "pounce": pounce,
        "bind": bind,
        "dip": dip,
        "dip2": dip2,
        "if-else": if_else,
        "linrec": linrec,
        "linrec5": linrec5,
        "binrec": binrec,
        "constrec": constrec,

        "=": equal_keep,
        "==": equal_,
        "!=": not_equal,
        ">": _ordering(lambda a, b: a > b, "A B -> A > B"),
        "<": _ordering(lambda a, b: a < b, "A B -> A < B"),
        ">=": _ordering(lambda a, b: a >= b, "A B -> A >= B"),
        "<=": _ordering(lambda a, b: a <= b, "A B -> A <= B"),

        "concat": concat,
        "cons": cons,
        "uncons": uncons,
        "push": push,
        "pop": pop_,
        "size": size,
        "outAt": out_at,
        "inAt": in_at,

        "type-of": type_of,
        "is-a-type": is_a_type,
    }

    core = {name: Native(fn) for name, fn in natives.items()}
    core["words"] = Native(words, introspective=True)
    core["word"] = Native(word, introspective=True)
    core.update({name: Composed(parse(source)) for name, source in COMPOSED.items()})

    return WordDictionary(core)


CORE_WORDS = build_core_words()
