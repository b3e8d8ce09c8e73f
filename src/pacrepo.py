"""pacrepo - pacman repository tools.

Compares package versions, lists .SRCINFO packages and resolves the set of
packages needed to satisfy a list of targets from repository databases.

    Returns:
        int: Exit code
"""
import csv
import sys
import logging
import json
import os

from constants import ExitCodes, Constants, OutputFormats
from common import msg
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from cli_config import apply_config, load_config
from errors import ParseError
from versioning.compare import compare_package_version
from database.reader import read_databases
from database.srcinfo import parse_srcinfo_dir
from resolver.index import build_indexes
from resolver.resolve import resolve

logger = logging.getLogger(__name__)


def load_lines_file(file_name):
    """Loads non-empty, non-comment lines from a file.

    Args:
        file_name (str): File path containing one entry per line.

    Raises:
        OSError: If the file cannot be read.

    Returns:
        list: List of entries
    """
    with open(file_name, encoding='utf-8') as file:
        lines = [line.strip() for line in file]
    return [line for line in lines if line and not line.startswith("#")]


def collect_targets(args):
    """Gather target names from -p and -f, keeping first-seen order."""
    targets = list(args.PACKAGES)
    for path in args.PACKAGE_FILES:
        targets.extend(load_lines_file(path))
    return list(dict.fromkeys(targets))


def collect_databases(args):
    """Gather database paths from -r and --database-file."""
    paths = list(args.DATABASES)
    for path in args.DATABASE_FILES:
        paths.extend(load_lines_file(path))
    return list(dict.fromkeys(paths))


def csv_rows(packages):
    """Header row followed by one row per package; missing values are blank."""
    headers = ["name", "version", "repository", "filename"]
    rows = [headers]
    for pkg in packages:
        data = pkg.to_dict()
        rows.append(["" if data[key] is None else data[key] for key in headers])
    return rows


def export_csv(packages, path):
    """Exports the resolved packages to a CSV file.

    Args:
        packages (list): List of packages.
        path (str): File path to export the CSV.
    """
    with open(path, 'w', newline='', encoding='utf-8') as file:
        export = csv.writer(file)
        export.writerows(csv_rows(packages))
    logging.info("CSV file has been successfully exported at: %s", path)


def export_json(packages, path):
    """Exports the resolved packages to a JSON file.

    Args:
        packages (list): List of packages.
        path (str): File path to export the JSON.
    """
    data = [pkg.to_dict() for pkg in packages]
    with open(path, 'w', encoding='utf-8') as file:
        json.dump(data, file, ensure_ascii=False, indent=4)
    logging.info("JSON file has been successfully exported at: %s", path)


def export_text(packages, path):
    """Exports the resolved packages as ``name version`` lines."""
    with open(path, 'w', encoding='utf-8') as file:
        for pkg in packages:
            file.write(f"{pkg.name} {pkg.version}\n")
    logging.info("Text file has been successfully exported at: %s", path)


_EXPORTERS = {
    OutputFormats.TEXT.value: export_text,
    OutputFormats.JSON.value: export_json,
    OutputFormats.CSV.value: export_csv,
}


def infer_output_format(args):
    """Infer --format from the --output extension when it was not given."""
    if args.OUTPUT_FORMAT is None and args.OUTPUT:
        ext = os.path.splitext(args.OUTPUT)[1].lower().lstrip(".")
        if ext in (OutputFormats.JSON.value, OutputFormats.CSV.value):
            args.OUTPUT_FORMAT = ext


def _progress(args, text):
    if not args.QUIET:
        msg.msg(text)


def run_resolve(args):
    """Handle the ``resolve`` subcommand."""
    try:
        targets = collect_targets(args)
        db_paths = collect_databases(args)
    except OSError as e:
        msg.error(f"failed to read input list: {e}")
        return ExitCodes.FILE_ERROR.value

    if not targets:
        msg.warning("no targets given")
        return ExitCodes.SUCCESS.value
    if not db_paths:
        msg.error("no repository databases given (use -r or --database-file)")
        return ExitCodes.USAGE_ERROR.value

    _progress(args, f"Reading {len(db_paths)} repository database(s)")
    try:
        repositories = read_databases(db_paths)
    except ValueError as e:
        msg.error(str(e))
        return ExitCodes.USAGE_ERROR.value
    except ParseError as e:
        msg.error(str(e))
        return ExitCodes.PARSE_ERROR.value
    except OSError as e:
        msg.error(f"failed to read database: {e}")
        return ExitCodes.FILE_ERROR.value
    if not args.QUIET:
        for name, packages in repositories:
            msg.msg2(f"{name}: {len(packages)} package(s)")

    indexes = build_indexes(pkg for _, packages in repositories for pkg in packages)

    _progress(args, f"Resolving {len(targets)} target(s)")
    result = resolve(targets, indexes, follow_dependencies=bool(args.DEPENDENCIES))
    if not result.ok:
        msg.error(str(result.error))
        return ExitCodes.RESOLVE_ERROR.value

    selected = [indexes.packages[name] for name in sorted(result.packages)]
    if is_debug_enabled(logger):
        logger.debug(
            "Resolution finished",
            extra=extra_context(
                event="decision",
                component="cli",
                action="resolve",
                outcome="success",
                count=len(selected),
            ),
        )

    if args.OUTPUT:
        try:
            _EXPORTERS[args.OUTPUT_FORMAT](selected, args.OUTPUT)
        except (OSError, csv.Error) as e:
            msg.error(f"output file couldn't be written to disk: {e}")
            return ExitCodes.FILE_ERROR.value
        _progress(args, f"Wrote {len(selected)} package(s) to {args.OUTPUT}")
    elif args.OUTPUT_FORMAT == OutputFormats.JSON.value:
        print(json.dumps([pkg.to_dict() for pkg in selected], ensure_ascii=False, indent=4))
    elif args.OUTPUT_FORMAT == OutputFormats.CSV.value:
        csv.writer(sys.stdout).writerows(csv_rows(selected))
    else:
        _progress(args, f"Packages to fetch ({len(selected)}):")
        for pkg in selected:
            print(f"{pkg.name} {pkg.version}")
    return ExitCodes.SUCCESS.value


def run_vercmp(args):
    """Handle the ``vercmp`` subcommand."""
    print(compare_package_version(args.VERSION_A, args.VERSION_B))
    return ExitCodes.SUCCESS.value


def run_list_srcinfo(args):
    """Handle the ``list-srcinfo`` subcommand."""
    if not os.path.isdir(args.DIRECTORY):
        msg.error(f"not a directory: {args.DIRECTORY}")
        return ExitCodes.FILE_ERROR.value
    _progress(args, f"Searching in {args.DIRECTORY}")
    try:
        packages = parse_srcinfo_dir(args.DIRECTORY)
    except ParseError as e:
        msg.error(str(e))
        return ExitCodes.PARSE_ERROR.value
    except OSError as e:
        msg.error(f"failed to read .SRCINFO: {e}")
        return ExitCodes.FILE_ERROR.value
    for pkg in packages:
        print(f"{pkg.name}-{pkg.version}")
    return ExitCodes.SUCCESS.value


_COMMANDS = {
    "resolve": run_resolve,
    "vercmp": run_vercmp,
    "list-srcinfo": run_list_srcinfo,
}


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    cli_level = args.LOG_LEVEL
    if cli_level:
        os.environ[Constants.ENV_LOG_LEVEL] = cli_level
    configure_logging(args.LOG_FILE)

    cfg = load_config(args.CONFIG)
    if hasattr(args, "OUTPUT"):
        infer_output_format(args)
    apply_config(args, cfg)
    if args.LOG_LEVEL and args.LOG_LEVEL != cli_level:
        logging.getLogger().setLevel(getattr(logging, args.LOG_LEVEL))

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.COMMAND)
        )

    return _COMMANDS[args.COMMAND](args)


if __name__ == "__main__":
    sys.exit(main())
