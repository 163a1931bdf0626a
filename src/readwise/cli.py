"""Command-line interface for the Readwise client."""

import argparse
import logging
import os
import sys
from typing import Callable, Iterable, List, Optional

from dotenv import load_dotenv

from readwise.auth import auth
from readwise.client import ReadwiseClient
from readwise.exceptions import ReadwiseError
from readwise.logging import setup_logging
from readwise.models import Book, ClientConfig, Highlight, LocationType, NewHighlight
from readwise.version import __version__

logger = logging.getLogger(__name__)

TOKEN_ENV_VARS = ("ACCESS_TOKEN", "READWISE_TOKEN")
BASE_URL_ENV_VAR = "READWISE_BASE_URL"

EXIT_OK = 0
EXIT_API_ERROR = 1
EXIT_USAGE = 2


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="readwise",
        description="Read and edit your Readwise books and highlights.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--token",
        help="Readwise access token (default: $ACCESS_TOKEN or $READWISE_TOKEN).",
    )
    parser.add_argument(
        "--base-url",
        help=f"API host (default: ${BASE_URL_ENV_VAR} or https://readwise.io).",
    )
    parser.add_argument("--timeout", type=float, default=30.0, help="Request timeout in seconds.")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
    )
    parser.add_argument("--json", action="store_true", help="Print records as JSON lines.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    auth_parser = subparsers.add_parser("auth", help="Check that the access token is valid")
    auth_parser.set_defaults(func=handle_auth)

    books = subparsers.add_parser("books", help="List books on one page")
    books.add_argument("--page", type=int, default=1)
    books.set_defaults(func=handle_books)

    book = subparsers.add_parser("book", help="Show a single book")
    book.add_argument("id", type=int)
    book.set_defaults(func=handle_book)

    highlights = subparsers.add_parser("highlights", help="List highlights on one page")
    highlights.add_argument("--page", type=int, default=1)
    highlights.set_defaults(func=handle_highlights)

    highlight = subparsers.add_parser("highlight", help="Show a single highlight")
    highlight.add_argument("id", type=int)
    highlight.set_defaults(func=handle_highlight)

    create = subparsers.add_parser("create", help="Create a highlight")
    create.add_argument("--text", required=True)
    create.add_argument("--title")
    create.add_argument("--author")
    create.add_argument("--note")
    create.add_argument("--source-url")
    create.add_argument("--location", type=int)
    create.add_argument(
        "--location-type", choices=[member.value for member in LocationType]
    )
    create.set_defaults(func=handle_create)

    update = subparsers.add_parser("update", help="Update fields of a highlight")
    update.add_argument("id", type=int)
    update.add_argument("--text")
    update.add_argument("--note")
    update.add_argument("--color")
    update.add_argument("--location", type=int)
    update.set_defaults(func=handle_update)

    delete = subparsers.add_parser("delete", help="Delete a highlight")
    delete.add_argument("id", type=int)
    delete.set_defaults(func=handle_delete)

    return parser


def resolve_token(args: argparse.Namespace) -> Optional[str]:
    if args.token:
        return args.token
    for name in TOKEN_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value
    return None


def build_config(args: argparse.Namespace) -> ClientConfig:
    base_url = args.base_url or os.environ.get(BASE_URL_ENV_VAR)
    if base_url:
        return ClientConfig(base_url=base_url, timeout=args.timeout)
    return ClientConfig(timeout=args.timeout)


def _print_books(books: Iterable[Book], as_json: bool) -> None:
    for book in books:
        if as_json:
            print(book.model_dump_json())
        else:
            author = f" ({book.author})" if book.author else ""
            print(f"{book.id}\t{book.title}{author}")


def _print_highlights(highlights: Iterable[Highlight], as_json: bool) -> None:
    for highlight in highlights:
        if as_json:
            print(highlight.model_dump_json())
        else:
            print(f"{highlight.id}\t{highlight.text}")


def handle_auth(client: ReadwiseClient, args: argparse.Namespace) -> None:
    # the client was authenticated while being built
    print("Token is valid.")


def handle_books(client: ReadwiseClient, args: argparse.Namespace) -> None:
    _print_books(client.get_books(args.page), args.json)


def handle_book(client: ReadwiseClient, args: argparse.Namespace) -> None:
    _print_books([client.get_book(args.id)], args.json)


def handle_highlights(client: ReadwiseClient, args: argparse.Namespace) -> None:
    _print_highlights(client.get_highlights(args.page), args.json)


def handle_highlight(client: ReadwiseClient, args: argparse.Namespace) -> None:
    _print_highlights([client.get_highlight(args.id)], args.json)


def handle_create(client: ReadwiseClient, args: argparse.Namespace) -> None:
    new_highlight = NewHighlight(
        text=args.text,
        title=args.title,
        author=args.author,
        note=args.note,
        source_url=args.source_url,
        location=args.location,
        location_type=args.location_type,
    )
    _print_highlights(client.create_highlights([new_highlight]), args.json)


def handle_update(client: ReadwiseClient, args: argparse.Namespace) -> None:
    fields = {
        name: getattr(args, name)
        for name in ("text", "note", "color", "location")
        if getattr(args, name) is not None
    }
    if not fields:
        raise ValueError("Nothing to update: pass at least one of --text, --note, --color, --location")
    _print_highlights([client.update_highlight(args.id, fields)], args.json)


def handle_delete(client: ReadwiseClient, args: argparse.Namespace) -> None:
    client.delete_highlight(args.id)
    print(f"Deleted highlight {args.id}.")


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``readwise`` command."""
    load_dotenv()
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(level=args.log_level)

    token = resolve_token(args)
    if not token:
        print(
            "No access token: pass --token or set ACCESS_TOKEN (a .env file works too).",
            file=sys.stderr,
        )
        return EXIT_USAGE

    handler: Callable[[ReadwiseClient, argparse.Namespace], None] = args.func
    try:
        with auth(token, config=build_config(args)) as client:
            handler(client, args)
    except ReadwiseError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_API_ERROR
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    return EXIT_OK
