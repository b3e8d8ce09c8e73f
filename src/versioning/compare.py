"""Pacman version comparison.

Implements the ``vercmp`` ordering used by pacman for pkgver and pkgrel
strings, and the full ``[epoch:]pkgver[-pkgrel]`` package version order.
Comparison functions return -1, 0 or 1 and never raise.
"""

from __future__ import annotations

from typing import Optional, Tuple


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _is_alpha(char: str) -> bool:
    return char.isalpha()


def _is_alnum(char: str) -> bool:
    # Restricted to ASCII digits and letters so every alnum run splits into
    # digit and letter runs.
    return _is_digit(char) or _is_alpha(char)


def _take_while(text: str, pos: int, predicate) -> int:
    end = pos
    while end < len(text) and predicate(text[end]):
        end += 1
    return end


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _compare_alnum(a: str, b: str) -> int:
    """Compare two alphanumeric runs by alternating digit and letter runs."""
    i = j = 0
    while i < len(a) or j < len(b):
        i_num = _take_while(a, i, _is_digit)
        j_num = _take_while(b, j, _is_digit)
        i_alpha = _take_while(a, i_num, _is_alpha)
        j_alpha = _take_while(b, j_num, _is_alpha)

        a_num = int(a[i:i_num]) if i_num > i else -1
        b_num = int(b[j:j_num]) if j_num > j else -1
        result = _cmp(a_num, b_num)
        if result:
            return result

        # An absent letter run is newer than any present one.
        a_alpha = a[i_num:i_alpha]
        b_alpha = b[j_num:j_alpha]
        result = _cmp((not a_alpha, a_alpha), (not b_alpha, b_alpha))
        if result:
            return result

        i, j = i_alpha, j_alpha
    return 0


def compare_version_string(a: str, b: str) -> int:
    """Compare two pkgver or pkgrel strings with the pacman algorithm.

    Returns:
        -1 if ``a`` is older than ``b``, 0 if equal, 1 if newer.
    """
    i = j = 0
    while i < len(a) or j < len(b):
        i_end = _take_while(a, i, _is_alnum)
        j_end = _take_while(b, j, _is_alnum)
        result = _compare_alnum(a[i:i_end], b[j:j_end])
        if result:
            return result

        # Separator runs fold into one; having one where the other side
        # has none is newer.
        i_sep = _take_while(a, i_end, lambda c: not _is_alnum(c))
        j_sep = _take_while(b, j_end, lambda c: not _is_alnum(c))
        result = _cmp(i_sep > i_end, j_sep > j_end)
        if result:
            return result

        i, j = i_sep, j_sep
    return 0


def version_key(text: str) -> Tuple:
    """Hashable normal form of a version string.

    Two strings have equal keys exactly when :func:`compare_version_string`
    reports them equal.
    """
    runs = []
    pos = 0
    while pos < len(text):
        end = _take_while(text, pos, _is_alnum)
        parts = []
        cur = pos
        while cur < end:
            num_end = _take_while(text, cur, _is_digit)
            alpha_end = _take_while(text, num_end, _is_alpha)
            number = int(text[cur:num_end]) if num_end > cur else -1
            parts.append((number, text[num_end:alpha_end]))
            cur = alpha_end
        sep_end = _take_while(text, end, lambda c: not _is_alnum(c))
        runs.append((tuple(parts), sep_end > end))
        pos = sep_end
    return tuple(runs)


def split_epoch(version: str) -> Tuple[Optional[int], str]:
    """Consume a leading ``<digits>:`` epoch.

    An empty digit run before the colon means epoch 0. When the text before
    the first colon is not all digits, nothing is consumed and the epoch is
    None.
    """
    end = _take_while(version, 0, _is_digit)
    if end < len(version) and version[end] == ":":
        return (int(version[:end]) if end else 0), version[end + 1:]
    return None, version


def split_pkgrel(version: str) -> Tuple[str, Optional[str]]:
    """Split ``pkgver-pkgrel`` at the last ``-``."""
    rest, sep, pkgrel = version.rpartition("-")
    if not sep:
        return version, None
    return rest, pkgrel


def split_parts(version: str) -> Tuple[int, str, Optional[str]]:
    """Leniently split a version string into ``(epoch, pkgver, pkgrel)``."""
    epoch, rest = split_epoch(version)
    pkgver, pkgrel = split_pkgrel(rest)
    return (epoch or 0), pkgver, pkgrel


def compare_parts(a: Tuple[int, str, Optional[str]], b: Tuple[int, str, Optional[str]]) -> int:
    """Compare two ``(epoch, pkgver, pkgrel)`` triples."""
    result = _cmp(a[0], b[0])
    if result:
        return result
    result = compare_version_string(a[1], b[1])
    if result:
        return result
    a_rel, b_rel = a[2], b[2]
    if a_rel is None or b_rel is None:
        # A missing pkgrel is older than any present one.
        return _cmp(a_rel is not None, b_rel is not None)
    return compare_version_string(a_rel, b_rel)


def compare_package_version(a: str, b: str) -> int:
    """Compare two full ``[epoch:]pkgver[-pkgrel]`` strings.

    Epoch dominates, then pkgver, then pkgrel. Parsing is permissive: a
    malformed epoch is treated as part of pkgver.
    """
    return compare_parts(split_parts(a), split_parts(b))
