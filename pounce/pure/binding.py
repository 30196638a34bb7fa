"""Local bindings without closures: formal names are replaced by captured stack values directly inside a copy of a
word body, which is then run (pounce) or pushed back as data (crouch).

    5 [x] [x x *] pounce        ->  5 5 *        ->  25
    1 2 [C D] [D C] bind        ->  2 1

Only Symbols are substituted, so a quoted string that happens to spell a formal name is left alone.
"""

from pounce.pure.values import Symbol, to_list_or_none

PLACEHOLDERS = ["A", "C", "D", "E", "F", "G", "H"]


def deep_zip(names, values):
    """Pairs names with values, right-aligned: the last name gets the last value. A name that is itself a list is
    zipped element-wise with its (list) value. Returns the local dictionary, or None if names and values don't fit.
    """
    count = min(len(names), len(values))
    local_wd = {}
    for name, value in zip(names[len(names) - count:], values[len(values) - count:]):
        if isinstance(name, list):
            if not isinstance(value, list):
                return None

            nested = deep_zip(name, value)
            if nested is None:
                return None
            local_wd.update(nested)

        elif isinstance(name, str):
            local_wd[name] = value

        else:
            return None

    return local_wd


def sub_in_wd(local_wd, words):
    """Returns a copy of words with every Symbol bound in local_wd replaced by its value, nested lists included."""
    resolved = []
    for word in words:
        if isinstance(word, Symbol) and word in local_wd:
            resolved.append(local_wd[word])
        elif isinstance(word, list):
            resolved.append(sub_in_wd(local_wd, word))
        else:
            resolved.append(word)
    return resolved


def _resolve(s):
    """Shared by pounce and crouch: takes the body and the formal names, then one value per name. Leaves s as it was
    if they don't fit.
    """
    if len(s) < 2:
        return None
    arg_list, words = to_list_or_none(s[-2]), to_list_or_none(s[-1])
    if words is None or arg_list is None or len(s) - 2 < len(arg_list):
        return None

    start = len(s) - 2 - len(arg_list)
    local_wd = deep_zip(arg_list, s[start:-2])
    if local_wd is None:
        return None

    del s[start:]
    return sub_in_wd(local_wd, words)


def pounce(s, pl):
    """[names] [body] -> body run with names bound to stack values"""
    new_words = _resolve(s)
    if new_words is None:
        return None

    pl.extendleft(reversed(new_words))
    return s, pl


def crouch(s, pl):
    """[names] [body] -> [body with names bound to stack values]"""
    new_words = _resolve(s)
    if new_words is None:
        return None

    s.append(new_words)
    return s, pl


def bind(s, pl):
    """[in] [out] -> out run with placeholders (A C D E F G H) in 'in' replaced by stack values

    If the stack runs out before 'in' does, the remaining 'in', the partly bound 'out' and the word bind are pushed
    back onto the stack instead, ready to be completed later.
    """
    if len(s) < 2:
        return None
    fi, fo = to_list_or_none(s[-2]), to_list_or_none(s[-1])
    if fo is None or fi is None:
        return None

    del s[-2:]
    fi = list(fi)
    while s and fi:
        se = s.pop()
        e = fi.pop()
        if isinstance(e, str) and e in PLACEHOLDERS:
            fo = [se if isinstance(foe, Symbol) and foe == e else foe for foe in fo]

    if not fi:
        pl.extendleft(reversed(fo))
    else:
        s.extend([fi, fo, Symbol("bind")])
    return s, pl
