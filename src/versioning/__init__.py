"""Pacman version ordering and dependency token parsing."""

from .compare import compare_package_version, compare_version_string, version_key
from .models import Constraint, Dependency, Provides, Version, VersionConstraint
from .parser import (
    parse_constraint,
    parse_dependency,
    parse_optional_dependency,
    parse_provides,
    parse_version_constraint,
)

__all__ = [
    "compare_package_version",
    "compare_version_string",
    "version_key",
    "Constraint",
    "Dependency",
    "Provides",
    "Version",
    "VersionConstraint",
    "parse_constraint",
    "parse_dependency",
    "parse_optional_dependency",
    "parse_provides",
    "parse_version_constraint",
]
