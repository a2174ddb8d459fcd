from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv

from settee.adapters.couchdb import DocumentCodec
from settee.app import open_database
from settee.config import configure_logging
from settee.domain.errors import NotFoundError, SetteeError
from settee.domain.model import Document

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Inspect and write CouchDB documents")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--models",
        action="append",
        default=[],
        metavar="MODULE",
        help="Import MODULE to register its document classes (repeatable)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    load = subparsers.add_parser("load", help="Print stored documents as JSON")
    load.add_argument("ids", nargs="+", help="Document ids to load")
    load.add_argument(
        "--strict",
        action="store_true",
        help="Fail when any of the requested documents is missing",
    )

    put = subparsers.add_parser("put", help="Bulk save documents from a JSON file")
    put.add_argument("path", type=Path, help="File holding a JSON array of documents")

    return parser.parse_args(list(argv))


def _serialise(document: object) -> Any:
    if isinstance(document, Document):
        return document.to_dict()
    return document


def _read_documents(path: Path, codec: DocumentCodec) -> list[Document]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise ValueError(f"{path} must contain a JSON array")
    documents: list[Document] = []
    for entry in payload:
        if not isinstance(entry, dict):
            raise ValueError(f"{path} must contain JSON objects only")
        decoded = codec.decode(entry)
        if not isinstance(decoded, Document):
            raise ValueError(f"Unknown document type in {path}: {entry.get('type')!r}")
        decoded.mark_dirty()
        documents.append(decoded)
    return documents


def main(argv: Sequence[str] | None = None) -> None:
    """Command line entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
    for module in parsed_args.models:
        importlib.import_module(module)

    try:
        with open_database() as db:
            if parsed_args.command == "load":
                ids: list[str] = parsed_args.ids
                if parsed_args.strict:
                    documents = db.load_or_raise(ids)
                else:
                    documents = db.load(ids)
                print(json.dumps([_serialise(d) for d in documents], indent=2))  # noqa: T201
            elif parsed_args.command == "put":
                documents = _read_documents(parsed_args.path, DocumentCodec())
                results = db.bulk_save(documents, validate=False)
                failed = [result for result in results or () if not result.ok]
                log.info(
                    "Saved %d documents, %d failed", len(documents) - len(failed), len(failed)
                )
                for result in failed:
                    log.warning("%s: %s (%s)", result.id, result.error, result.reason)
                if failed:
                    sys.exit(1)
            else:
                raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except NotFoundError as exc:
        log.error("Missing documents: %s", exc)  # noqa: TRY400
        sys.exit(1)
    except (SetteeError, ValueError):
        log.exception("Command failed")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
