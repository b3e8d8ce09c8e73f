"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    USAGE_ERROR = 2
    RESOLVE_ERROR = 3
    PARSE_ERROR = 4


class OutputFormats(Enum):
    """Output formats supported by the resolve command.

    Args:
        Enum (string): Output formats supported by the resolve command.
    """

    TEXT = "text"
    JSON = "json"
    CSV = "csv"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    PROG = "pacrepo"
    OUTPUT_FORMATS = [fmt.value for fmt in OutputFormats]
    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    DEFAULT_LOG_LEVEL = "INFO"

    ENV_LOG_LEVEL = "PACREPO_LOG_LEVEL"
    ENV_CONFIG = "PACREPO_CONFIG"
    ENV_XDG_CONFIG_HOME = "XDG_CONFIG_HOME"
    CONFIG_FILE_NAMES = ["pacrepo.yml", "pacrepo.yaml"]
    CONFIG_DIR_NAME = "pacrepo"
    CONFIG_USER_FILE = "config.yml"

    # ALPM repository databases
    DB_DESC_FILE = "desc"
    DB_DEPENDS_FILE = "depends"
    DB_SUFFIXES = [".db.tar.gz", ".db.tar.bz2", ".db.tar.xz", ".db.tar.zst", ".db.tar", ".db"]
    SRCINFO_FILE = ".SRCINFO"

    # Defaults, overridable from the configuration file
    FOLLOW_DEPENDENCIES = False
    OUTPUT_FORMAT = OutputFormats.TEXT.value
