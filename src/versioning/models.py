"""Data models for versions, version constraints and dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Optional

from errors import VersionErrorKind, VersionParseError
from .compare import compare_parts, split_parts, split_pkgrel, version_key


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """A package version: ``[epoch:]pkgver[-pkgrel]``.

    Ordering and equality follow the pacman comparison rules, so
    ``Version(0, "1.2")`` equals ``Version(0, "1..2")``. A missing pkgrel is
    older than any present pkgrel.
    """
    epoch: int
    pkgver: str
    pkgrel: Optional[str] = None

    @classmethod
    def from_string(cls, text: str) -> "Version":
        """Split ``text`` leniently; never raises."""
        epoch, pkgver, pkgrel = split_parts(text)
        return cls(epoch, pkgver, pkgrel)

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse ``text`` strictly.

        Raises:
            VersionParseError: if the epoch is not a non-negative integer or
                the pkgrel contains anything but ASCII digits and dots. An empty
                pkgrel (``1.0-``) is accepted.
        """
        before, colon, after = text.partition(":")
        if colon:
            if not before or not all("0" <= c <= "9" for c in before):
                raise VersionParseError(VersionErrorKind.INVALID_EPOCH, text)
            epoch, rest = int(before), after
        else:
            epoch, rest = 0, text

        pkgver, pkgrel = split_pkgrel(rest)
        if pkgrel is not None and not all(c == "." or "0" <= c <= "9" for c in pkgrel):
            raise VersionParseError(VersionErrorKind.INVALID_PKGREL, text)
        return cls(epoch, pkgver, pkgrel)

    @classmethod
    def parse_package_version(cls, text: str) -> "Version":
        """Parse ``text`` strictly and require a pkgrel."""
        version = cls.parse(text)
        if version.pkgrel is None:
            raise VersionParseError(VersionErrorKind.MISSING_PKGREL, text)
        return version

    def _parts(self):
        return (self.epoch, self.pkgver, self.pkgrel)

    def compare(self, other: "Version") -> int:
        return compare_parts(self._parts(), other._parts())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        pkgrel = None if self.pkgrel is None else version_key(self.pkgrel)
        return hash((self.epoch, version_key(self.pkgver), pkgrel))

    def __str__(self) -> str:
        # a colon in pkgver would be read back as the epoch separator
        if self.epoch == 0 and ":" not in self.pkgver:
            text = self.pkgver
        else:
            text = f"{self.epoch}:{self.pkgver}"
        if self.pkgrel is not None:
            text = f"{text}-{self.pkgrel}"
        return text


class Constraint(Enum):
    """Comparison operator of a versioned dependency."""
    EQUAL = "="
    GREATER = ">"
    GREATER_EQUAL = ">="
    LESS = "<"
    LESS_EQUAL = "<="


@dataclass(frozen=True)
class VersionConstraint:
    """A constraint such as ``>=1.2-3`` attached to a dependency."""
    version: Version
    constraint: Constraint

    def __str__(self) -> str:
        return f"{self.constraint.value}{self.version}"


@dataclass(frozen=True)
class Dependency:
    """A dependency, conflict or replacement entry.

    ``description`` is only set for optional dependencies written as
    ``name: reason``.
    """
    name: str
    version: Optional[VersionConstraint] = None
    description: Optional[str] = None

    @classmethod
    def unconstrained(cls, name: str) -> "Dependency":
        return cls(name)

    @classmethod
    def constrained(cls, name: str, constraint: Constraint, version: Version) -> "Dependency":
        return cls(name, VersionConstraint(version, constraint))

    def __str__(self) -> str:
        text = self.name if self.version is None else f"{self.name}{self.version}"
        if self.description is not None:
            text = f"{text}: {self.description}"
        return text


@dataclass(frozen=True)
class Provides:
    """A name, optionally versioned, that a package satisfies besides its own."""
    name: str
    version: Optional[Version] = None

    @classmethod
    def unversioned(cls, name: str) -> "Provides":
        return cls(name)

    @classmethod
    def versioned(cls, name: str, version: Version) -> "Provides":
        return cls(name, version)

    def __str__(self) -> str:
        return self.name if self.version is None else f"{self.name}={self.version}"
