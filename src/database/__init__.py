"""Readers for ALPM repository databases and .SRCINFO files."""

from .alpm import package_from_fields, parse_dict, parse_package_entry
from .package import Package, PartialPackage
from .reader import read_database, read_databases, read_db_archive, read_db_dir, repository_name
from .srcinfo import iterate_info, parse_srcinfo, parse_srcinfo_dir, parse_srcinfo_file

__all__ = [
    "package_from_fields",
    "parse_dict",
    "parse_package_entry",
    "Package",
    "PartialPackage",
    "read_database",
    "read_databases",
    "read_db_archive",
    "read_db_dir",
    "repository_name",
    "iterate_info",
    "parse_srcinfo",
    "parse_srcinfo_dir",
    "parse_srcinfo_file",
]
