"""Token parsing for dependency, provides and constraint strings.

Dependency tokens are parsed permissively: empty names or versions are
legal so existing database files keep round-tripping.
"""

from typing import Optional, Tuple

from .models import Constraint, Dependency, Provides, Version, VersionConstraint

# Longest operators first so ">=" is not read as ">" followed by "=".
_CONSTRAINT_PREFIXES: Tuple[Tuple[str, Constraint], ...] = (
    (">=", Constraint.GREATER_EQUAL),
    ("<=", Constraint.LESS_EQUAL),
    (">", Constraint.GREATER),
    ("<", Constraint.LESS),
    ("==", Constraint.EQUAL),
    ("=", Constraint.EQUAL),
)

_CONSTRAINT_CHARS = "<>="


def _find_constraint_char(token: str) -> Optional[int]:
    for index, char in enumerate(token):
        if char in _CONSTRAINT_CHARS:
            return index
    return None


def parse_constraint(text: str) -> Tuple[Constraint, str]:
    """Split a leading comparison operator off ``text``.

    Returns:
        Tuple of (constraint, remainder).

    Raises:
        ValueError: if ``text`` does not start with an operator.
    """
    for prefix, constraint in _CONSTRAINT_PREFIXES:
        if text.startswith(prefix):
            return constraint, text[len(prefix):]
    raise ValueError(f"expected a version constraint, got {text!r}")


def parse_version_constraint(text: str) -> VersionConstraint:
    """Parse ``>=1.2-3`` style text into a VersionConstraint."""
    constraint, rest = parse_constraint(text)
    return VersionConstraint(Version.from_string(rest), constraint)


def parse_dependency(token: str) -> Dependency:
    """Parse a dependency token such as ``foo>=1.2-3``.

    The name ends at the first ``<``, ``>`` or ``=``; a token without any
    of them is unversioned.
    """
    index = _find_constraint_char(token)
    if index is None:
        return Dependency(token)
    return Dependency(token[:index], parse_version_constraint(token[index:]))


def parse_optional_dependency(token: str) -> Dependency:
    """Parse an optdepends entry, keeping a trailing ``: reason`` as description."""
    head, sep, reason = token.partition(": ")
    if not sep:
        return parse_dependency(token)
    dependency = parse_dependency(head.strip())
    return Dependency(dependency.name, dependency.version, reason.strip())


def parse_provides(token: str) -> Provides:
    """Parse a provides token such as ``libfoo.so=3-64``.

    Only ``=`` is meaningful here; the token is split at its first ``=``.
    """
    name, sep, version = token.partition("=")
    if not sep:
        return Provides(token)
    return Provides(name, Version.from_string(version))
