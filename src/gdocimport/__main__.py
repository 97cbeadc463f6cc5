"""CLI entry point for gdocimport.

Usage:
    python -m gdocimport [<document_id_or_url>] [--dry-run]

The document defaults to GDOC_IMPORT_DOCUMENT_ID. With --dry-run the
document is converted against an in-memory repository and the RichText body
is printed instead of being stored.
"""

from __future__ import annotations

import argparse
import asyncio
import re
import sys

from pydantic import ValidationError

from gdocimport.config import Settings, get_settings
from gdocimport.credentials import get_access_token
from gdocimport.errors import AuthError, ConfigurationError, FetchError
from gdocimport.importer import Importer
from gdocimport.logging import logger, setup_logging
from gdocimport.repository import InMemoryRepository, Repository
from gdocimport.rest import RestRepository
from gdocimport.transport import GoogleDocsTransport

EXIT_OK = 0
EXIT_FETCH_FAILED = 1
EXIT_STORE_FAILED = 2


def parse_document_id(id_or_url: str) -> str:
    """Extract document ID from a URL or return as-is if already an ID."""
    url_pattern = r"docs\.google\.com/document/d/([a-zA-Z0-9_-]+)"
    match = re.search(url_pattern, id_or_url)
    if match:
        return match.group(1)
    return id_or_url


def build_repository(settings: Settings, *, dry_run: bool) -> Repository:
    if dry_run:
        return InMemoryRepository()
    return RestRepository(
        settings.repository_url or "",
        settings.repository_username or "",
        settings.repository_password or "",
        language_code=settings.language_code,
        timeout=settings.http_timeout,
    )


async def cmd_import(args: argparse.Namespace, settings: Settings) -> int:
    """Import one document."""
    document = args.document or settings.document_id
    if not document:
        print(
            "Error: no document given and GDOC_IMPORT_DOCUMENT_ID is not set",
            file=sys.stderr,
        )
        return EXIT_FETCH_FAILED
    document_id = parse_document_id(document)

    try:
        settings.require(dry_run=args.dry_run)
        access_token = get_access_token(settings)
    except (ConfigurationError, AuthError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FETCH_FAILED

    transport = GoogleDocsTransport(access_token, timeout=settings.http_timeout)
    repository = build_repository(settings, dry_run=args.dry_run)
    logger.info("Google Docs client ok")

    importer = Importer(
        transport,
        repository,
        document_content_type=settings.document_content_type,
        document_parent_location=settings.document_parent_location or "",
        image_content_type=settings.image_content_type,
        image_parent_location=settings.image_parent_location or "",
    )
    try:
        result = await importer.run(document_id)
    except (AuthError, FetchError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FETCH_FAILED
    finally:
        await transport.close()
        await repository.close()

    if args.dry_run:
        print(result.body.to_xml_string(), end="")

    for skipped in result.skipped:
        print(f"Skipped: {skipped}", file=sys.stderr)

    if not result.success:
        print(f"Error: {result.message}", file=sys.stderr)
        return EXIT_STORE_FAILED

    print(result.message, file=sys.stderr if args.dry_run else sys.stdout)
    return EXIT_OK


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="gdocimport",
        description="Import a Google Docs document into eZ Platform as RichText",
    )
    parser.add_argument(
        "document",
        nargs="?",
        default=None,
        help="Document ID or Google Docs URL (default: GDOC_IMPORT_DOCUMENT_ID)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Convert only; print the RichText XML instead of storing it",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        default=None,
        help="Write logs as JSON lines",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Minimum log level (default: INFO)",
    )
    args = parser.parse_args()

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_FETCH_FAILED

    setup_logging(
        json_logs=args.json_logs if args.json_logs is not None else settings.json_logs,
        log_level=(args.log_level or settings.log_level).upper(),
    )

    result: int = asyncio.run(cmd_import(args, settings))
    return result


if __name__ == "__main__":
    sys.exit(main())
