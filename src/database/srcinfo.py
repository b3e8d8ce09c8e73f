"""Reader for ``.SRCINFO`` files produced by ``makepkg --printsrcinfo``.

A ``.SRCINFO`` blob is a list of ``key = value`` lines. A ``pkgbase``
section comes first and is followed by one ``pkgname`` section per
package built from it. Package sections inherit every field they do not
set themselves from the ``pkgbase`` section.
"""

from __future__ import annotations

import logging
import os
from typing import Iterator, List, Optional, Tuple

from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants
from errors import SrcinfoParseError
from versioning.parser import parse_dependency, parse_optional_dependency, parse_provides
from .package import Package, PartialPackage

logger = logging.getLogger(__name__)

_SINGLE_KEYS = {
    "pkgver": "pkgver",
    "pkgrel": "pkgrel",
    "pkgdesc": "description",
    "url": "url",
}

_LIST_KEYS = {
    "license": ("licenses", str),
    "groups": ("groups", str),
    "backup": ("backup", str),
    "arch": ("arch", str),
    "provides": ("provides", parse_provides),
    "conflicts": ("conflicts", parse_dependency),
    "replaces": ("replaces", parse_dependency),
    "depends": ("depends", parse_dependency),
    "optdepends": ("optdepends", parse_optional_dependency),
    "makedepends": ("makedepends", parse_dependency),
    "checkdepends": ("checkdepends", parse_dependency),
}


def iterate_info(blob: str) -> Iterator[Tuple[int, str, str]]:
    """Yield ``(line_nr, key, value)`` for every ``key = value`` line.

    Whitespace around keys and values is removed. Empty lines and ``#``
    comments are skipped.

    Raises:
        SrcinfoParseError: on a line without ``=``.
    """
    for line_nr, line in enumerate(blob.split("\n"), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            raise SrcinfoParseError("expected 'key = value' or empty line", line=line_nr)
        yield line_nr, key.strip(), value.strip()


def _apply(section: PartialPackage, line_nr: int, key: str, value: str) -> None:
    if key == "epoch":
        if section.epoch is not None:
            raise SrcinfoParseError("duplicate key: epoch", line=line_nr)
        if not value.isdigit() or not value.isascii():
            raise SrcinfoParseError(f"invalid epoch: {value!r}", line=line_nr)
        section.epoch = int(value)
    elif key in _SINGLE_KEYS:
        attr = _SINGLE_KEYS[key]
        if getattr(section, attr) is not None:
            raise SrcinfoParseError(f"duplicate key: {key}", line=line_nr)
        setattr(section, attr, value)
    elif key in _LIST_KEYS:
        attr, parser = _LIST_KEYS[key]
        values = getattr(section, attr)
        if values is None:
            values = []
            setattr(section, attr, values)
        # An empty value overrides the pkgbase list with an empty one.
        if value:
            values.append(parser(value))
    else:
        logger.debug("Ignoring unknown .SRCINFO key %r on line %d", key, line_nr)


def parse_srcinfo(blob: str, source: Optional[str] = None) -> List[Package]:
    """Parse a ``.SRCINFO`` blob into the packages it describes.

    Raises:
        SrcinfoParseError: on malformed lines, a missing ``pkgbase`` header,
            or a package without ``pkgver``.
    """
    base: Optional[PartialPackage] = None
    base_name: Optional[str] = None
    sections: List[PartialPackage] = []
    current: Optional[PartialPackage] = None

    try:
        for line_nr, key, value in iterate_info(blob):
            if key == "pkgbase":
                if base is not None:
                    raise SrcinfoParseError("duplicate pkgbase section", line=line_nr)
                base_name = value
                base = current = PartialPackage()
            elif key == "pkgname":
                if base is None:
                    raise SrcinfoParseError("pkgname before pkgbase", line=line_nr)
                current = PartialPackage(pkgname=value)
                sections.append(current)
            elif current is None:
                raise SrcinfoParseError(f"expected pkgbase, got {key!r}", line=line_nr)
            else:
                _apply(current, line_nr, key, value)

        if base is None:
            raise SrcinfoParseError("missing pkgbase")
        if not sections:
            raise SrcinfoParseError(f"no pkgname in pkgbase {base_name}")

        packages = []
        for section in sections:
            section.add_base(base)
            packages.append(section.into_package(base=base_name))
        return packages
    except SrcinfoParseError as exc:
        if source is None:
            raise
        raise exc.with_source(source) from None


def parse_srcinfo_file(path: str) -> List[Package]:
    with open(path, "r", encoding="utf-8") as handle:
        return parse_srcinfo(handle.read(), source=path)


def parse_srcinfo_dir(root: str) -> List[Package]:
    """Parse every ``.SRCINFO`` found below ``root``.

    Returns:
        Packages sorted by name.

    Raises:
        SrcinfoParseError: on the first malformed file.
    """
    packages: List[Package] = []
    with Timer() as t:
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames.sort()
            if Constants.SRCINFO_FILE in filenames:
                packages.extend(parse_srcinfo_file(os.path.join(dirpath, Constants.SRCINFO_FILE)))
    packages.sort(key=lambda package: package.name)
    if is_debug_enabled(logger):
        logger.debug(
            "Crawled .SRCINFO files",
            extra=extra_context(
                event="srcinfo_crawl",
                component="srcinfo",
                action="parse_srcinfo_dir",
                target=root,
                count=len(packages),
                duration_ms=t.duration_ms(),
            ),
        )
    return packages
