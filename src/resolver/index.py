"""Name and provider indexes over a package collection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import AbstractSet, Dict, Iterable, Mapping, Set

from common.logging_utils import extra_context, is_debug_enabled
from database.package import Package

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Indexes:
    """Lookup tables used by the resolver.

    Read-only once built: the attributes cannot be reassigned and both
    tables are exposed as read-only mappings of frozensets.

    Attributes:
        packages: package name to the package that owns it.
        providers: provided name to the names of every package providing it.
            Each package provides its own name.
    """
    packages: Mapping[str, Package] = field(default_factory=dict)
    providers: Mapping[str, AbstractSet[str]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "packages", MappingProxyType(dict(self.packages)))
        providers = {name: frozenset(owners) for name, owners in self.providers.items()}
        object.__setattr__(self, "providers", MappingProxyType(providers))

    def providers_of(self, name: str) -> AbstractSet[str]:
        return self.providers.get(name, frozenset())


def build_indexes(packages: Iterable[Package]) -> Indexes:
    """Index ``packages`` by name and by everything they provide.

    The first package seen for a name wins; later duplicates are reported
    and dropped.
    """
    by_name: Dict[str, Package] = {}
    providers: Dict[str, Set[str]] = {}
    duplicates = 0
    for package in packages:
        existing = by_name.get(package.name)
        if existing is not None:
            duplicates += 1
            logger.warning(
                "Duplicate package %s: keeping %s from %s, ignoring %s from %s",
                package.name,
                existing.version,
                existing.repository or "<unknown>",
                package.version,
                package.repository or "<unknown>",
            )
            continue
        by_name[package.name] = package
        for name in package.provided_names:
            providers.setdefault(name, set()).add(package.name)

    indexes = Indexes(packages=by_name, providers=providers)
    if is_debug_enabled(logger):
        logger.debug(
            "Built package indexes",
            extra=extra_context(
                event="index_built",
                component="index",
                action="build_indexes",
                count=len(indexes.packages),
                providers=len(indexes.providers),
                duplicates=duplicates,
            ),
        )
    return indexes
