"""Dependency closure over an indexed package collection.

Starting from a set of target names, the resolver picks one concrete
package for every name that is not yet provided by an earlier pick and
follows runtime ``depends`` until nothing is left. Names are handled in
lexicographic order so results do not depend on input order.

Version constraints on dependencies are parsed but not checked: any
provider of a name satisfies it.
"""

from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Set

from common.logging_utils import Timer, extra_context, is_debug_enabled
from database.package import Package
from errors import InconsistentIndex, NoProviderFound, ResolveError
from .index import Indexes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of a resolution run.

    On failure ``packages`` is empty and ``error`` names the offending
    target or package.
    """
    packages: FrozenSet[str]
    error: Optional[ResolveError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> FrozenSet[str]:
        """Return the selected names or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.packages


class DependencyResolver:
    """Single-use resolver state over shared, read-only indexes."""

    def __init__(self, indexes: Indexes, follow_dependencies: bool = True):
        self.indexes = indexes
        self.follow_dependencies = follow_dependencies
        self.selected: Set[str] = set()
        self.provided: Set[str] = set()
        self._queue: List[str] = []
        self._queued: Set[str] = set()

    def _enqueue(self, name: str) -> None:
        if name in self._queued or name in self.provided:
            return
        self._queued.add(name)
        heapq.heappush(self._queue, name)

    def _pop(self) -> str:
        name = heapq.heappop(self._queue)
        self._queued.discard(name)
        return name

    def _select(self, package: Package) -> None:
        self.selected.add(package.name)
        self.provided.update(package.provided_names)
        if self.follow_dependencies:
            for dependency in package.depends:
                self._enqueue(dependency.name)

    def find_provider(self, target: str) -> Package:
        """Return the package chosen to satisfy ``target``.

        A package named ``target`` always wins; otherwise the provider with
        the smallest name is used.

        Raises:
            NoProviderFound: nothing provides ``target``.
            InconsistentIndex: the chosen provider is not in the name index.
        """
        package = self.indexes.packages.get(target)
        if package is not None:
            return package
        candidates = self.indexes.providers_of(target)
        if not candidates:
            raise NoProviderFound(target)
        candidate = min(candidates)
        package = self.indexes.packages.get(candidate)
        if package is None:
            raise InconsistentIndex(candidate)
        if len(candidates) > 1:
            logger.debug("Picked %s for %s out of %s", candidate, target, ", ".join(sorted(candidates)))
        return package

    def run(self, targets: Iterable[str]) -> FrozenSet[str]:
        """Resolve ``targets`` to the set of package names to fetch.

        Raises:
            ResolveError: on the first target that cannot be satisfied.
        """
        for target in targets:
            package = self.indexes.packages.get(target)
            if package is not None:
                self._select(package)
            else:
                self._enqueue(target)

        while self._queue:
            name = self._pop()
            if name in self.provided:
                continue
            self._select(self.find_provider(name))
        return frozenset(self.selected)


def resolve(targets: Iterable[str], indexes: Indexes, follow_dependencies: bool = True) -> ResolutionResult:
    """Compute the packages needed to satisfy ``targets``.

    Args:
        targets: package or virtual names requested explicitly.
        indexes: indexes built with ``build_indexes``.
        follow_dependencies: also pull in the transitive runtime ``depends``.

    Returns:
        ResolutionResult with either the selected names or the error.
    """
    targets = list(targets)
    resolver = DependencyResolver(indexes, follow_dependencies=follow_dependencies)
    with Timer() as t:
        try:
            packages = resolver.run(targets)
        except ResolveError as exc:
            logger.debug("Resolution failed: %s", exc)
            return ResolutionResult(frozenset(), exc)
    if is_debug_enabled(logger):
        logger.debug(
            "Resolved targets",
            extra=extra_context(
                event="resolve_complete",
                component="resolver",
                action="resolve",
                outcome="ok",
                count=len(packages),
                targets=len(targets),
                duration_ms=t.duration_ms(),
            ),
        )
    return ResolutionResult(packages)
