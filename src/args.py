"""Argument parsing functionality for pacrepo."""

import argparse
from constants import Constants

def build_parser():
    """Build the argument parser with its subcommands."""
    parser = argparse.ArgumentParser(
        prog=Constants.PROG,
        description=(
            "pacrepo - pacman repository tools: version comparison and dependency resolution"
        ),
        add_help=True,
    )

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (default: INFO)",
                        action="store",
                        type=str.upper,
                        choices=Constants.LOG_LEVELS)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output progress messages to console.",
                        action="store_true")

    subparsers = parser.add_subparsers(dest="COMMAND", metavar="COMMAND")
    subparsers.required = True

    resolve = subparsers.add_parser("resolve",
                                    help="Compute the packages needed for a set of targets")
    resolve.add_argument("-p", "--package",
                         dest="PACKAGES",
                         help="Target package or provided name. Can be given multiple times.",
                         action="append", type=str,
                         default=[])
    resolve.add_argument("-f", "--package-file",
                         dest="PACKAGE_FILES",
                         help="Load target names from a file, one per line.",
                         action="append", type=str,
                         default=[])
    resolve.add_argument("-d", "--dependencies",
                         dest="DEPENDENCIES",
                         help="Also resolve the runtime dependencies of the targets.",
                         action="store_true",
                         default=None)
    resolve.add_argument("-r", "--database",
                         dest="DATABASES",
                         help="Repository database directory or archive. Can be given multiple times.",
                         action="append", type=str,
                         default=[])
    resolve.add_argument("--database-file",
                         dest="DATABASE_FILES",
                         help="Load database paths from a file, one per line.",
                         action="append", type=str,
                         default=[])
    resolve.add_argument("-o", "--output",
                         dest="OUTPUT",
                         help="Path to output file (text, JSON or CSV)",
                         action="store",
                         type=str)
    resolve.add_argument("--format",
                         dest="OUTPUT_FORMAT",
                         help="Output format. If not specified, inferred from --output extension; defaults to text.",
                         action="store",
                         type=str.lower,
                         choices=Constants.OUTPUT_FORMATS)

    vercmp = subparsers.add_parser("vercmp",
                                   help="Compare two package versions, printing -1, 0 or 1")
    vercmp.add_argument("VERSION_A", help="First version")
    vercmp.add_argument("VERSION_B", help="Second version")

    list_srcinfo = subparsers.add_parser("list-srcinfo",
                                         help="List packages of every .SRCINFO below a directory")
    list_srcinfo.add_argument("DIRECTORY", help="Directory to search")

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
