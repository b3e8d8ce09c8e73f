"""Reader for ALPM repository database entries.

Each package in a repository database is a directory holding a ``desc``
file and, in older databases, a ``depends`` file. Both use the same block
format::

    %NAME%
    linux
    %DEPENDS%
    coreutils
    kmod

A key line ``%KEY%`` is followed by one value per line until the next key.
Lines are trimmed, empty lines are ignored and keys may be repeated, in
which case their values are concatenated.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from errors import AlpmParseError, VersionParseError
from versioning.models import Version
from versioning.parser import parse_dependency, parse_optional_dependency, parse_provides
from .package import Package

logger = logging.getLogger(__name__)


def _parse_key(line: str) -> Optional[str]:
    if len(line) >= 2 and line.startswith("%") and line.endswith("%"):
        return line[1:-1]
    return None


def parse_dict(blob: str, source: Optional[str] = None) -> Dict[str, List[str]]:
    """Parse a ``%KEY%`` block file into a mapping of key to values.

    Raises:
        AlpmParseError: if the first non-empty line is not a key.
    """
    result: Dict[str, List[str]] = {}
    values: Optional[List[str]] = None
    for line_nr, line in enumerate(blob.split("\n"), start=1):
        line = line.strip()
        if not line:
            continue
        key = _parse_key(line)
        if key is not None:
            values = result.setdefault(key, [])
            continue
        if values is None:
            raise AlpmParseError(
                "expected first non-empty line to be a key in the format %NAME%",
                source=source,
                line=line_nr,
            )
        values.append(line)
    return result


def _single(fields: Dict[str, List[str]], key: str, source: Optional[str], required: bool = False) -> Optional[str]:
    values = fields.get(key)
    if not values:
        if required:
            raise AlpmParseError(f"missing required field %{key}%", source=source)
        return None
    if len(values) != 1:
        raise AlpmParseError(f"expected a single value for %{key}%, got {len(values)}", source=source)
    return values[0]


def _integer(fields: Dict[str, List[str]], key: str, source: Optional[str]) -> Optional[int]:
    value = _single(fields, key, source)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise AlpmParseError(f"invalid value for %{key}%, expected an integer: {value!r}", source=source) from None


def _parsed_list(fields: Dict[str, List[str]], key: str, parser: Callable) -> list:
    return [parser(value) for value in fields.get(key, [])]


_LIST_FIELDS = {
    "DEPENDS": ("depends", parse_dependency),
    "OPTDEPENDS": ("optdepends", parse_optional_dependency),
    "MAKEDEPENDS": ("makedepends", parse_dependency),
    "CHECKDEPENDS": ("checkdepends", parse_dependency),
    "CONFLICTS": ("conflicts", parse_dependency),
    "REPLACES": ("replaces", parse_dependency),
    "PROVIDES": ("provides", parse_provides),
    "GROUPS": ("groups", str),
    "LICENSE": ("licenses", str),
    "BACKUP": ("backup", str),
}

_SINGLE_FIELDS = {
    "FILENAME": "filename",
    "BASE": "base",
    "DESC": "description",
    "URL": "url",
    "ARCH": "arch",
    "PACKAGER": "packager",
    "MD5SUM": "md5sum",
    "SHA256SUM": "sha256sum",
    "PGPSIG": "pgpsig",
}

_INTEGER_FIELDS = {
    "CSIZE": "compressed_size",
    "ISIZE": "installed_size",
    "BUILDDATE": "build_date",
}

_KNOWN_FIELDS = set(_LIST_FIELDS) | set(_SINGLE_FIELDS) | set(_INTEGER_FIELDS) | {"NAME", "VERSION"}


def package_from_fields(fields: Dict[str, List[str]], source: Optional[str] = None,
                        repository: Optional[str] = None) -> Package:
    """Build a Package from parsed ``desc``/``depends`` fields.

    Raises:
        AlpmParseError: if NAME or VERSION is missing or malformed.
    """
    name = _single(fields, "NAME", source, required=True)
    raw_version = _single(fields, "VERSION", source, required=True)
    try:
        version = Version.parse_package_version(raw_version)
    except VersionParseError as exc:
        raise AlpmParseError(f"invalid %VERSION%: {exc}", source=source) from exc

    unknown = sorted(set(fields) - _KNOWN_FIELDS)
    if unknown:
        logger.debug("Ignoring unknown fields in %s: %s", source or name, ", ".join(unknown))

    kwargs = {attr: _single(fields, key, source) for key, attr in _SINGLE_FIELDS.items()}
    kwargs.update({attr: _integer(fields, key, source) for key, attr in _INTEGER_FIELDS.items()})
    kwargs.update({attr: _parsed_list(fields, key, parser) for key, (attr, parser) in _LIST_FIELDS.items()})
    return Package(name=name, version=version, repository=repository, **kwargs)


def parse_package_entry(desc: str, depends: Optional[str] = None, source: Optional[str] = None,
                        repository: Optional[str] = None) -> Package:
    """Parse one database entry from its ``desc`` and optional ``depends`` text."""
    fields = parse_dict(desc, source=source)
    if depends:
        for key, values in parse_dict(depends, source=source).items():
            fields.setdefault(key, []).extend(values)
    return package_from_fields(fields, source=source, repository=repository)
