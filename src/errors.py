"""Exception types shared by the version, database and resolver layers."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class PacrepoError(Exception):
    """Base class for all errors raised by pacrepo."""


class VersionErrorKind(Enum):
    """Reason a strict version parse was rejected."""
    INVALID_EPOCH = "invalid epoch in version"
    INVALID_PKGREL = "invalid pkgrel in version"
    MISSING_PKGREL = "missing pkgrel in version"


class VersionParseError(PacrepoError, ValueError):
    """Raised by the strict version constructors.

    The lenient comparison functions never raise this.
    """

    def __init__(self, kind: VersionErrorKind, text: str):
        super().__init__(f"{kind.value}: {text!r}")
        self.kind = kind
        self.text = text


class ResolveError(PacrepoError):
    """Base class for dependency resolution failures.

    Carries the offending name so callers can report it.
    """

    def __init__(self, name: str, message: str):
        super().__init__(message)
        self.name = name


class NoProviderFound(ResolveError):
    """No concrete package and no provider exists for a target."""

    def __init__(self, target: str):
        super().__init__(target, f"no provider found for target: {target}")

    @property
    def target(self) -> str:
        return self.name


class InconsistentIndex(ResolveError):
    """The provider index references a package missing from the name index."""

    def __init__(self, name: str):
        super().__init__(name, f"no such package: {name}")


class ParseError(PacrepoError):
    """Malformed metadata input, with the location it was found at."""

    def __init__(self, message: str, source: Optional[str] = None, line: Optional[int] = None):
        self.message = message
        self.source = source
        self.line = line
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.source is not None and self.line is not None:
            return f"{self.source}:{self.line}: {self.message}"
        if self.source is not None:
            return f"{self.source}: {self.message}"
        if self.line is not None:
            return f"line {self.line}: {self.message}"
        return self.message

    def with_source(self, source: str) -> "ParseError":
        """Return a copy of this error attributed to ``source`` if it has none."""
        if self.source is not None:
            return self
        return type(self)(self.message, source=source, line=self.line)


class AlpmParseError(ParseError):
    """Malformed ALPM repository database entry."""


class SrcinfoParseError(ParseError):
    """Malformed .SRCINFO blob."""
