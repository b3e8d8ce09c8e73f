"""Package records shared by the database and .SRCINFO readers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from errors import SrcinfoParseError
from versioning.models import Dependency, Provides, Version


@dataclass
class Package:
    """A concrete package with its relations.

    The package's own name is not listed in ``provides``; the indexing
    layer adds that self-provide.
    """
    name: str
    version: Version
    provides: List[Provides] = field(default_factory=list)
    depends: List[Dependency] = field(default_factory=list)
    optdepends: List[Dependency] = field(default_factory=list)
    makedepends: List[Dependency] = field(default_factory=list)
    checkdepends: List[Dependency] = field(default_factory=list)
    conflicts: List[Dependency] = field(default_factory=list)
    replaces: List[Dependency] = field(default_factory=list)
    groups: List[str] = field(default_factory=list)
    backup: List[str] = field(default_factory=list)
    licenses: List[str] = field(default_factory=list)
    description: Optional[str] = None
    url: Optional[str] = None

    # Repository database metadata, absent for .SRCINFO packages.
    base: Optional[str] = None
    filename: Optional[str] = None
    arch: Optional[str] = None
    packager: Optional[str] = None
    build_date: Optional[int] = None
    compressed_size: Optional[int] = None
    installed_size: Optional[int] = None
    md5sum: Optional[str] = None
    sha256sum: Optional[str] = None
    pgpsig: Optional[str] = None
    repository: Optional[str] = None

    @property
    def provided_names(self) -> List[str]:
        """The package name followed by every name in ``provides``."""
        return [self.name] + [target.name for target in self.provides]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "version": str(self.version),
            "repository": self.repository,
            "filename": self.filename,
        }


# Fields a split package inherits from its pkgbase section when unset.
_INHERITED_FIELDS = (
    "epoch", "pkgver", "pkgrel",
    "url", "description", "licenses",
    "groups", "backup", "arch",
    "provides", "conflicts", "replaces",
    "depends", "optdepends", "makedepends", "checkdepends",
)


@dataclass
class PartialPackage:
    """A package section of a .SRCINFO blob with possibly missing fields."""
    pkgname: Optional[str] = None
    epoch: Optional[int] = None
    pkgver: Optional[str] = None
    pkgrel: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    licenses: Optional[List[str]] = None
    groups: Optional[List[str]] = None
    backup: Optional[List[str]] = None
    arch: Optional[List[str]] = None
    provides: Optional[List[Provides]] = None
    conflicts: Optional[List[Dependency]] = None
    replaces: Optional[List[Dependency]] = None
    depends: Optional[List[Dependency]] = None
    optdepends: Optional[List[Dependency]] = None
    makedepends: Optional[List[Dependency]] = None
    checkdepends: Optional[List[Dependency]] = None

    def add_base(self, base: "PartialPackage") -> None:
        """Fill every unset field from the pkgbase section."""
        for name in _INHERITED_FIELDS:
            if getattr(self, name) is None:
                value = getattr(base, name)
                setattr(self, name, list(value) if isinstance(value, list) else value)

    def into_package(self, base: Optional[str] = None) -> Package:
        """Build a Package.

        Raises:
            SrcinfoParseError: if pkgname or pkgver is missing.
        """
        if self.pkgname is None:
            raise SrcinfoParseError("missing pkgname")
        if self.pkgver is None:
            raise SrcinfoParseError(f"missing pkgver for {self.pkgname}")
        arch = self.arch or []
        return Package(
            name=self.pkgname,
            version=Version(self.epoch or 0, self.pkgver, self.pkgrel),
            provides=list(self.provides or []),
            depends=list(self.depends or []),
            optdepends=list(self.optdepends or []),
            makedepends=list(self.makedepends or []),
            checkdepends=list(self.checkdepends or []),
            conflicts=list(self.conflicts or []),
            replaces=list(self.replaces or []),
            groups=list(self.groups or []),
            backup=list(self.backup or []),
            licenses=list(self.licenses or []),
            description=self.description,
            url=self.url,
            base=base,
            arch=" ".join(arch) if arch else None,
        )

