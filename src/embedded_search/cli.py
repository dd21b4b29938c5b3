"""Index a JSON Lines file and run a query against it."""

from __future__ import annotations

import argparse
from collections.abc import Iterator, Sequence
import logging
from pathlib import Path
import sys
from typing import Any

import orjson

from embedded_search.config import get_settings
from embedded_search.document_index import DocumentIndex
from embedded_search.observability import configure_logging
from embedded_search.search.errors import InvalidDocumentIdError, SearchIndexError


logger = logging.getLogger(__name__)


def _parse_field(spec: str) -> tuple[str, float | None]:
    name, sep, boost = spec.partition(":")
    if not name:
        raise argparse.ArgumentTypeError(f"invalid field spec {spec!r}")
    if not sep:
        return name, None
    try:
        return name, float(boost)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid boost in field spec {spec!r}") from exc


def _iter_records(path: Path) -> Iterator[dict[str, Any]]:
    with path.open("rb") as handle:
        for line_number, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                record = orjson.loads(line)
            except orjson.JSONDecodeError as exc:
                logger.warning("Skipping %s:%d: %s", path, line_number, exc)
                continue
            if not isinstance(record, dict):
                logger.warning("Skipping %s:%d: expected a JSON object", path, line_number)
                continue
            yield record


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="embedded-search",
        description="Index a JSON Lines file in memory and print BM25-ranked matches for a query.",
    )
    parser.add_argument("documents", type=Path, help="JSON Lines file, one document object per line.")
    parser.add_argument("query", help="Free text query.")
    parser.add_argument(
        "--field",
        dest="fields",
        action="append",
        type=_parse_field,
        required=True,
        metavar="NAME[:BOOST]",
        help="Field to index; repeat for several fields.",
    )
    parser.add_argument("--id-field", default="id", help="Record key holding the document id (default: id).")
    parser.add_argument("--limit", type=int, default=10, help="Maximum results to print (default: 10).")
    parser.add_argument("--k1", type=float, default=None, help="Override BM25 k1.")
    parser.add_argument("--b", type=float, default=None, help="Override BM25 b.")
    parser.add_argument("--terms", action="store_true", help="Print the expanded query terms instead of results.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)

    if not args.documents.exists():
        logger.error("Documents file does not exist: %s", args.documents)
        return 1

    index = DocumentIndex(k1=args.k1, b=args.b, name=args.documents.stem, settings=settings)
    try:
        for name, boost in args.fields:
            index.add_field(name, boost=boost)

        skipped = 0
        for record in _iter_records(args.documents):
            document_id = record.get(args.id_field)
            if document_id is None:
                skipped += 1
                continue
            try:
                index.add(document_id, record)
            except InvalidDocumentIdError:
                logger.warning("Skipping record with unhashable id %r", document_id)
                skipped += 1
    except SearchIndexError as exc:
        logger.error("Indexing failed: %s", exc)
        return 1

    logger.info("Indexed %d documents (%d without a usable id skipped)", index.size, skipped)

    if args.terms:
        payload: Any = index.query_to_terms(args.query)
    else:
        payload = [
            {"id": result.doc_id, "score": result.score} for result in index.search(args.query, limit=args.limit)
        ]
    sys.stdout.write(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode("utf-8") + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
