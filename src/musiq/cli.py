"""
musiq CLI - Entry point

Thin front end over the library and query domains. Parses arguments,
calls the store, and prints results with Rich.
"""

import argparse
import sys
from typing import List, Optional

from loguru import logger
from rich.console import Console
from rich.markup import escape

from musiq import __version__
from musiq.core import config, database
from musiq.core.exceptions import ConditionParseError, MusiqError
from musiq.core.output import setup_logging
from musiq.domain import library
from musiq.domain.query import Operator, export_songs, parse_condition

console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    err_console.print(f"[red]Error:[/red] {escape(message)}")


def cmd_init(args: argparse.Namespace) -> int:
    db_path = database.init_database()
    console.print(f"Database ready at {escape(str(db_path))}")

    config_path = config.write_default_config()
    if config_path:
        console.print(f"Created default configuration at {escape(str(config_path))}")
    return 0


def cmd_song_add(args: argparse.Namespace) -> int:
    library.add_song(args.path)
    console.print(f"Added song: {escape(args.path)}")
    return 0


def cmd_song_remove(args: argparse.Namespace) -> int:
    if library.remove_song(args.path):
        console.print(f"Removed song: {escape(args.path)}")
    else:
        console.print(f"No song stored at {escape(args.path)}", style="yellow")
    return 0


def cmd_song_show(args: argparse.Namespace) -> int:
    tags = library.get_song_tags(args.path)
    console.print(escape(args.path), style="bold")
    if not tags:
        console.print("  (no tags)", style="dim")
    for song_tag in tags:
        console.print(f"  {escape(song_tag.tag_name)}={song_tag.value}")
    return 0


def cmd_song_tag(args: argparse.Namespace) -> int:
    """Apply name=value pairs to a song, reporting bad pairs and continuing."""
    failures = 0
    for tag_arg in args.tags:
        try:
            condition = parse_condition(tag_arg)
            if condition.operator is not Operator.EQ:
                print_error(
                    f"Song tagging only supports '=' operator, got: {tag_arg}"
                )
                failures += 1
                continue
            library.add_tag(condition.tag_name)
            library.tag_song(args.path, condition.tag_name, condition.value)
            console.print(f"Tagged {escape(args.path)}: {escape(str(condition))}")
        except MusiqError as e:
            print_error(str(e))
            failures += 1

    return 1 if failures else 0


def cmd_tag_add(args: argparse.Namespace) -> int:
    library.add_tag(args.name)
    console.print(f"Added tag: {escape(args.name)}")
    return 0


def cmd_tag_remove(args: argparse.Namespace) -> int:
    if library.remove_tag(args.name):
        console.print(f"Removed tag: {escape(args.name)}")
    else:
        console.print(f"No tag named {escape(args.name)}", style="yellow")
    return 0


def cmd_tag_list(args: argparse.Namespace) -> int:
    tags = library.list_tags()
    if not tags:
        console.print("No tags defined", style="dim")
    for name in tags:
        console.print(escape(name))
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    if not args.conditions:
        print_error("No tag conditions specified")
        return 1

    try:
        songs = export_songs(args.conditions)
    except ConditionParseError as e:
        print_error(f"Error parsing tag condition: {e}")
        return 1

    if not songs:
        console.print("No songs found matching the specified conditions")
        return 0

    console.print(f"Found {len(songs)} songs:")
    for song in songs:
        console.print(song.path, markup=False)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="musiq",
        description="A CLI music library",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Conditions look like energy>=7 mood<5 background=3 "
        "(operators: =, >, <, >=, <=, !=; values 0-9)",
    )
    parser.add_argument("--version", action="version", version=f"musiq {__version__}")
    parser.add_argument("--db", help="Path to the database file")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug output to stderr"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    init_parser = subparsers.add_parser("init", help="Create the database")
    init_parser.set_defaults(func=cmd_init)

    # song
    song_parser = subparsers.add_parser(
        "song", aliases=["s"], help="Create or edit a song"
    )
    song_sub = song_parser.add_subparsers(dest="action", metavar="ACTION")
    song_sub.required = True

    song_add = song_sub.add_parser("add", help="Add a song to the db via its path")
    song_add.add_argument("path")
    song_add.set_defaults(func=cmd_song_add)

    song_remove = song_sub.add_parser(
        "remove", help="Remove a song from the db via its path"
    )
    song_remove.add_argument("path")
    song_remove.set_defaults(func=cmd_song_remove)

    song_show = song_sub.add_parser("show", help="Show a song's tags")
    song_show.add_argument("path")
    song_show.set_defaults(func=cmd_song_show)

    song_tag = song_sub.add_parser("tag", help="Tag a song with name=value pairs")
    song_tag.add_argument("path")
    song_tag.add_argument("tags", nargs="+", help="Tags and values, e.g. a=1 b=2")
    song_tag.set_defaults(func=cmd_song_tag)

    # tag
    tag_parser = subparsers.add_parser("tag", aliases=["t"], help="Tag operations")
    tag_sub = tag_parser.add_subparsers(dest="action", metavar="ACTION")
    tag_sub.required = True

    tag_add = tag_sub.add_parser("add", help="Define a tag")
    tag_add.add_argument("name")
    tag_add.set_defaults(func=cmd_tag_add)

    tag_remove = tag_sub.add_parser(
        "remove", help="Remove a tag and its values from every song"
    )
    tag_remove.add_argument("name")
    tag_remove.set_defaults(func=cmd_tag_remove)

    tag_list = tag_sub.add_parser("list", help="List all tags")
    tag_list.set_defaults(func=cmd_tag_list)

    # export
    export_parser = subparsers.add_parser(
        "export", aliases=["e"], help="Export a playlist from specified tags"
    )
    export_parser.add_argument(
        "conditions", nargs="*", help="Tag conditions, e.g. energy>=7 mood<5"
    )
    export_parser.set_defaults(func=cmd_export)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the musiq command. Returns the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = config.load_config()
        setup_logging(cfg.logging, verbose=args.verbose)
    except (ValueError, TypeError, OSError) as e:
        print_error(f"Invalid configuration: {e}")
        return 1

    db_path = args.db or cfg.database.path
    if db_path:
        database.set_database_path(db_path)

    logger.debug(f"Running command: {args.command} ({database.get_database_path()})")

    try:
        return args.func(args)
    except MusiqError as e:
        logger.error(f"{args.command} failed: {e}")
        print_error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
