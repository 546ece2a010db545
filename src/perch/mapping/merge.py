"""Deep merge of raw mapping fragments.

Merge rules for ``merge(a, b)``, applied depth-first in a single pass:

- key only in ``a`` or only in ``b``  -> kept unchanged
- integer key present in both         -> ``b``'s value is appended under
                                         the next free index, never
                                         overwriting ``a``'s entry
- string key present in both, both
  values nested containers            -> merged recursively
- anything else                       -> ``b`` wins

Lists are the integer-keyed case: index ``i`` is key ``i``, so merging
two lists concatenates them. Numeric-looking *strings* (``"0"``) are
ordinary map keys and overwrite.

The merge is associative only for non-conflicting keys: appending makes
``merge(merge(a, b), c)`` and ``merge(a, merge(b, c))`` agree, but a
scalar conflict on a string key is decided by whichever side comes last.
"""

from collections.abc import Iterable
from typing import Any

from perch._internal.types import Fragment


def _is_index(key: Any) -> bool:
    # bool is an int subclass, but True/False are never list positions
    return isinstance(key, int) and not isinstance(key, bool)


def _is_container(value: Any) -> bool:
    return isinstance(value, dict | list)


def _as_dict(value: dict[Any, Any] | list[Any]) -> dict[Any, Any]:
    if isinstance(value, list):
        return dict(enumerate(value))
    return dict(value)


def _next_index(data: dict[Any, Any]) -> int:
    indexes = [k for k in data if _is_index(k)]
    return max(indexes) + 1 if indexes else 0


def merge(a: Fragment, b: Fragment) -> Fragment:
    """Merge fragment *b* into a copy of fragment *a*.

    Neither input is mutated. Two lists yield a list, as does a list
    merged into an empty fragment; any other combination yields a dict.
    """
    if not a:
        return list(b) if isinstance(b, list) else dict(b)
    if isinstance(a, list) and isinstance(b, list):
        return [*a, *b]

    result = _as_dict(a)
    for key, value in _as_dict(b).items():
        if key not in result:
            result[key] = value
        elif _is_index(key):
            result[_next_index(result)] = value
        elif _is_container(value) and _is_container(result[key]):
            result[key] = merge(result[key], value)
        else:
            result[key] = value
    return result


def merge_all(fragments: Iterable[Fragment]) -> Fragment:
    """Fold *fragments* left to right. No fragments gives an empty dict."""
    merged: Fragment = {}
    for fragment in fragments:
        merged = merge(merged, fragment)
    return merged
