"""Configuration file loading and CLI precedence for pacrepo.

Settings come from, in order of precedence: command line options, the
first configuration file found, then the defaults in ``Constants``.
Configuration problems are logged and never abort the CLI.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)

_LIST_KEYS = ("databases", "database_files")


def default_config_paths() -> List[str]:
    """Candidate configuration files, most specific first (without ``-c``)."""
    paths = []
    env_path = os.environ.get(Constants.ENV_CONFIG)
    if env_path:
        paths.append(env_path)
    paths.extend(os.path.join(os.getcwd(), name) for name in Constants.CONFIG_FILE_NAMES)
    xdg_home = os.environ.get(Constants.ENV_XDG_CONFIG_HOME) or os.path.join(os.path.expanduser("~"), ".config")
    paths.append(os.path.join(xdg_home, Constants.CONFIG_DIR_NAME, Constants.CONFIG_USER_FILE))
    return paths


def find_config_file(explicit: Optional[str] = None) -> Optional[str]:
    """Return the configuration file to use, or None.

    An explicit path is returned even if it does not exist so the caller
    can report it.
    """
    if isinstance(explicit, str) and explicit.strip():
        return explicit
    for path in default_config_paths():
        if os.path.isfile(path):
            return path
    return None


def load_config_file(path: str) -> Dict[str, Any]:
    """Load a YAML or JSON configuration file.

    JSON is used for ``.json`` files, YAML otherwise. Returns an empty dict
    if the file is missing, unreadable or does not hold a mapping.
    """
    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return {}
    try:
        with open(path, "r", encoding="utf-8") as fh:
            if path.lower().endswith(".json"):
                data = json.load(fh)
            else:
                data = yaml.safe_load(fh)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error("Failed to load config %s: %s", path, e)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.error("Ignoring config %s: expected a mapping at the top level", path)
        return {}
    return data


def validate_config(cfg: Dict[str, Any], source: str = "<config>") -> Dict[str, Any]:
    """Keep only recognised keys with values of the right type."""
    valid: Dict[str, Any] = {}
    for key in _LIST_KEYS:
        value = cfg.get(key)
        if value is None:
            continue
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            valid[key] = list(value)
        else:
            logger.warning("Ignoring %s in %s: expected a list of paths", key, source)

    dependencies = cfg.get("dependencies")
    if dependencies is not None:
        if isinstance(dependencies, bool):
            valid["dependencies"] = dependencies
        else:
            logger.warning("Ignoring dependencies in %s: expected true or false", source)

    fmt = cfg.get("format")
    if fmt is not None:
        if isinstance(fmt, str) and fmt.lower() in Constants.OUTPUT_FORMATS:
            valid["format"] = fmt.lower()
        else:
            logger.warning("Ignoring format in %s: expected one of %s", source, ", ".join(Constants.OUTPUT_FORMATS))

    level = cfg.get("log_level")
    if level is not None:
        if isinstance(level, str) and level.upper() in Constants.LOG_LEVELS:
            valid["log_level"] = level.upper()
        else:
            logger.warning("Ignoring log_level in %s: expected one of %s", source, ", ".join(Constants.LOG_LEVELS))

    unknown = sorted(set(cfg) - set(_LIST_KEYS) - {"dependencies", "format", "log_level"})
    if unknown:
        logger.warning("Unknown keys in %s: %s", source, ", ".join(map(str, unknown)))
    return valid


def load_config(explicit: Optional[str] = None) -> Dict[str, Any]:
    """Find, load and validate the configuration."""
    path = find_config_file(explicit)
    if path is None:
        return {}
    cfg = validate_config(load_config_file(path), source=path)
    if cfg:
        logger.debug("Loaded config from %s", path)
    return cfg


def apply_config(args, cfg: Dict[str, Any]) -> None:
    """Fill options the command line left unset from ``cfg`` and ``Constants``.

    List options from the configuration are only used when the matching
    option was not given at all on the command line.
    """
    if hasattr(args, "DATABASES") and not args.DATABASES:
        args.DATABASES = list(cfg.get("databases", []))
    if hasattr(args, "DATABASE_FILES") and not args.DATABASE_FILES:
        args.DATABASE_FILES = list(cfg.get("database_files", []))
    if hasattr(args, "DEPENDENCIES") and args.DEPENDENCIES is None:
        args.DEPENDENCIES = cfg.get("dependencies", Constants.FOLLOW_DEPENDENCIES)
    if hasattr(args, "OUTPUT_FORMAT") and args.OUTPUT_FORMAT is None:
        args.OUTPUT_FORMAT = cfg.get("format", Constants.OUTPUT_FORMAT)
    if getattr(args, "LOG_LEVEL", None) is None and cfg.get("log_level"):
        args.LOG_LEVEL = cfg["log_level"]
