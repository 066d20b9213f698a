"""CLI entry point for notesjson."""

import argparse
import asyncio
import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from pathlib import Path

from .config import Config, load_config
from .errors import NotesError
from .exchange import delete_all, export_to_file, import_from_file
from .store import SQLiteNoteStore, format_timestamp

logger = logging.getLogger("notesjson")


LOG_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


class JSONLogFormatter(logging.Formatter):
    """One JSON object per log line, timestamped in UTC."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": format_timestamp(datetime.fromtimestamp(record.created, tz=timezone.utc)),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            entry["error"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_level: str | None = None,
    json_output: bool = False,
) -> None:
    """Configure logging on stderr so command output stays clean on stdout.

    Args:
        verbose: Log per-note import decisions (debug level).
        quiet: Only log warnings and errors.
        log_level: Explicit level name; overrides verbose and quiet.
        json_output: Emit JSON lines instead of text.
    """
    if log_level:
        level = LOG_LEVELS.get(log_level, logging.INFO)
    elif verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JSONLogFormatter())
    else:
        handler.setFormatter(logging.Formatter(fmt="notesjson %(levelname)s %(name)s: %(message)s"))

    logging.basicConfig(
        level=level,
        handlers=[handler],
    )


def _open_store(config: Config) -> SQLiteNoteStore:
    store = SQLiteNoteStore(config.store.db_path)
    store.connect()
    return store


def cmd_export(args: argparse.Namespace) -> int:
    """Export all notes to a timestamped JSON file."""
    config = load_config(args.config)
    directory = args.output or config.export.directory

    store = _open_store(config)
    try:
        path = export_to_file(store, directory=directory, indent=config.export.indent)
    except NotesError as e:
        logger.error(f"Export failed: {e}")
        return 1
    finally:
        store.close()

    print(path)
    return 0


def cmd_import(args: argparse.Namespace) -> int:
    """Import notes from a JSON file."""
    config = load_config(args.config)
    mode = args.mode or config.importing.default_mode

    store = _open_store(config)
    try:
        result = import_from_file(args.file, mode, store)
    except NotesError as e:
        logger.error(f"Import failed: {e}")
        return 1
    finally:
        store.close()

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(
            f"Imported {result.inserted} of {result.total} notes "
            f"({result.skipped_duplicates} duplicates skipped, mode={result.mode.value})"
        )
    return 0


def cmd_delete_all(args: argparse.Namespace) -> int:
    """Delete every stored note."""
    config = load_config(args.config)

    if not args.yes:
        answer = input(f"Delete all notes in {config.store.db_path}? [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            print("Aborted")
            return 1

    store = _open_store(config)
    try:
        removed = delete_all(store)
    except NotesError as e:
        logger.error(f"Delete failed: {e}")
        return 1
    finally:
        store.close()

    print(f"Deleted {removed} notes")
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """List stored notes, newest first."""
    config = load_config(args.config)

    store = _open_store(config)
    try:
        notes = store.fetch_all_sorted()
    except NotesError as e:
        logger.error(f"List failed: {e}")
        return 1
    finally:
        store.close()

    if args.limit:
        notes = notes[: args.limit]

    for note in notes:
        stamp = format_timestamp(note.timestamp) if note.timestamp else "(no timestamp)"
        title = note.title if note.title is not None else "(untitled)"
        print(f"{stamp}  {title}")

    return 0


def cmd_add(args: argparse.Namespace) -> int:
    """Add a single note."""
    config = load_config(args.config)

    store = _open_store(config)
    try:
        note = store.add_note(args.title, args.content)
    except NotesError as e:
        logger.error(f"Add failed: {e}")
        return 1
    finally:
        store.close()

    print(f"Added note {note.id} at {format_timestamp(note.timestamp)}")
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    """Show store statistics."""
    config = load_config(args.config)

    store = _open_store(config)
    try:
        stats = store.get_stats()
    except NotesError as e:
        logger.error(f"Status failed: {e}")
        return 1
    finally:
        store.close()

    status_data = {
        "timestamp": datetime.now().isoformat(),
        "store": stats,
        "export_directory": config.export.directory,
        "default_import_mode": config.importing.default_mode,
    }

    if args.json:
        print(json.dumps(status_data, indent=2))
    else:
        print("Notes Status")
        print("============")
        print(f"Database: {stats['db_path']}")
        print(f"  Notes: {stats['note_count']}")
        print(f"  Incomplete (not exportable): {stats['incomplete_count']}")
        if stats["newest"]:
            print(f"  Newest: {stats['newest']}")
            print(f"  Oldest: {stats['oldest']}")
        print()
        print(f"Export directory: {config.export.directory}")
        print(f"Default import mode: {config.importing.default_mode}")

    return 0


async def cmd_dashboard(args: argparse.Namespace) -> int:
    """Start the HTTP API."""
    config = load_config(args.config)

    try:
        from .dashboard import create_app

        import uvicorn
    except ImportError as e:
        print(f"Dashboard dependencies not installed: {e}", file=sys.stderr)
        print("Install with: pip install notesjson[dashboard]", file=sys.stderr)
        return 1

    host = args.host or config.dashboard.host
    port = args.port or config.dashboard.port

    store = _open_store(config)

    print("Starting notesjson API")
    print(f"Database: {config.store.db_path}")
    print(f"URL: http://{host}:{port}")

    app = create_app(config, store=store)

    try:
        verbose = getattr(args, "verbose", False)
        config_uvicorn = uvicorn.Config(
            app,
            host=host,
            port=port,
            log_level="info" if verbose else "warning",
        )
        server = uvicorn.Server(config_uvicorn)
        await server.serve()
    finally:
        store.close()

    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="notesjson",
        description="Export and import notes as portable JSON",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to config file (default: built-in defaults)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log per-note import decisions (debug level)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=list(LOG_LEVELS),
        default=None,
        help="Set log level explicitly (overrides -v and -q)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Output logs as JSON for machine parsing",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Export command
    export_parser = subparsers.add_parser("export", help="Export notes to a JSON file")
    export_parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Directory to write the export into (default: from config)",
    )
    export_parser.set_defaults(func=cmd_export)

    # Import command
    import_parser = subparsers.add_parser("import", help="Import notes from a JSON file")
    import_parser.add_argument("file", type=Path, help="JSON file to import")
    mode_group = import_parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--replace",
        dest="mode",
        action="store_const",
        const="replace",
        help="Delete all notes before importing",
    )
    mode_group.add_argument(
        "--merge",
        dest="mode",
        action="store_const",
        const="merge",
        help="Only add notes not already present",
    )
    import_parser.add_argument(
        "--json",
        action="store_true",
        help="Output the import result as JSON",
    )
    import_parser.set_defaults(func=cmd_import, mode=None)

    # Delete-all command
    delete_parser = subparsers.add_parser("delete-all", help="Delete every note")
    delete_parser.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Do not ask for confirmation",
    )
    delete_parser.set_defaults(func=cmd_delete_all)

    # List command
    list_parser = subparsers.add_parser("list", help="List notes, newest first")
    list_parser.add_argument(
        "-n", "--limit",
        type=int,
        default=None,
        help="Show at most this many notes",
    )
    list_parser.set_defaults(func=cmd_list)

    # Add command
    add_parser = subparsers.add_parser("add", help="Add a note")
    add_parser.add_argument("title", help="Note title")
    add_parser.add_argument("content", help="Note body")
    add_parser.set_defaults(func=cmd_add)

    # Status command
    status_parser = subparsers.add_parser("status", help="Show store statistics")
    status_parser.add_argument(
        "--json",
        action="store_true",
        help="Output status as JSON",
    )
    status_parser.set_defaults(func=cmd_status)

    # Dashboard command
    dashboard_parser = subparsers.add_parser("dashboard", help="Start the HTTP API")
    dashboard_parser.add_argument(
        "-p", "--port",
        type=int,
        default=None,
        help="Port to serve on (default: from config, 8080)",
    )
    dashboard_parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind to (default: from config, 127.0.0.1)",
    )
    dashboard_parser.set_defaults(func=cmd_dashboard)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.quiet, args.log_level, args.json_logs)

    if not args.command:
        parser.print_help()
        return 1

    try:
        func = args.func
        if asyncio.iscoroutinefunction(func):
            return asyncio.run(func(args))
        return func(args)
    except (NotesError, ValueError) as e:
        # Store could not be opened, or bad configuration values
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
