"""Command-line interface for the LegalLens document pipeline.

Usage::

    python -m legallens.cli ingest contract.pdf --user alice
    python -m legallens.cli list --user alice
    python -m legallens.cli summary <doc_id> --user alice
    python -m legallens.cli ask <doc_id> "When is the deadline?" --user alice
    python -m legallens.cli combine <doc_id> <doc_id> --strategy map-reduce
    python -m legallens.cli delete <doc_id> --user alice

Each invocation is a one-shot process: ``ingest`` waits for background
processing to finish before printing the result.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from legallens.main import Application, build_application
from legallens.models.document import DocumentStatus
from legallens.services.extraction.text_extractor import is_supported, media_type_for_filename
from legallens.utils.errors import InputError, LegalLensError, NotFoundError

_DEFAULT_USER = "local"


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


async def _handle_ingest(args: argparse.Namespace, app: Application) -> int:
    path = Path(args.file)
    if not path.is_file():
        print(f"Error: file not found: {path}", file=sys.stderr)
        return 1
    media_type = args.media_type or media_type_for_filename(path.name)
    if not is_supported(media_type):
        print(f"Warning: {media_type} is not a supported type; trying plain text")

    data = await asyncio.to_thread(path.read_bytes)
    document = await app.documents.upload(args.user, path.name, media_type, data)
    print(f"Uploaded {document.original_name} ({document.formatted_size}) as {document.document_id}")

    await app.drain()
    document = await app.documents.get_document(args.user, document.document_id)
    if document.status == DocumentStatus.ERROR:
        print(f"Processing failed: {document.error}", file=sys.stderr)
        return 1

    print(f"Status:  {document.status.value}")
    print(f"Type:    {document.file_type}")
    print(f"Chars:   {document.content_length}")
    if document.summary:
        print("\nSummary:")
        print(document.summary)
    return 0


async def _handle_list(args: argparse.Namespace, app: Application) -> int:
    documents = await app.documents.list_documents(args.user)
    if not documents:
        print("No documents.")
        return 0
    for doc in documents:
        print(
            f"{doc.document_id}  {doc.status.value:<10}  {doc.file_type:<8}  "
            f"{doc.formatted_size:>10}  {doc.original_name}"
        )
    return 0


async def _handle_summary(args: argparse.Namespace, app: Application) -> int:
    result = await app.documents.get_summary(args.user, args.document_id)
    if result.status == DocumentStatus.PROCESSING:
        print("Document is still processing.")
        return 2
    if result.status == DocumentStatus.ERROR:
        print(f"Processing failed: {result.error}", file=sys.stderr)
        return 1
    print(result.summary)
    return 0


async def _handle_ask(args: argparse.Namespace, app: Application) -> int:
    answer = await app.documents.ask(args.user, args.document_id, args.question)
    print(answer.response)
    return 0


async def _handle_combine(args: argparse.Namespace, app: Application) -> int:
    result = await app.documents.summarize_documents(
        args.user, args.document_ids, strategy=args.strategy
    )
    print(f"Summarised {result.documents_summarized} document(s) ({result.strategy}):\n")
    print(result.summary)
    return 0


async def _handle_delete(args: argparse.Namespace, app: Application) -> int:
    await app.documents.delete(args.user, args.document_id)
    print(f"Deleted {args.document_id}")
    return 0


_HANDLERS = {
    "ingest": _handle_ingest,
    "list": _handle_list,
    "summary": _handle_summary,
    "ask": _handle_ask,
    "combine": _handle_combine,
    "delete": _handle_delete,
}


# ---------------------------------------------------------------------------
# Parser / entry point
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m legallens.cli",
        description="Upload documents, read summaries and ask questions about them.",
    )
    parser.add_argument("--user", default=_DEFAULT_USER, help="Owner id (default: local)")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    subparsers = parser.add_subparsers(dest="command", help="Document commands")

    ingest_parser = subparsers.add_parser("ingest", help="Upload and process a document")
    ingest_parser.add_argument("file", help="Path to the document")
    ingest_parser.add_argument(
        "--media-type",
        dest="media_type",
        default=None,
        help="Override the media type guessed from the extension",
    )

    subparsers.add_parser("list", help="List your documents")

    summary_parser = subparsers.add_parser("summary", help="Print a document's summary")
    summary_parser.add_argument("document_id")

    ask_parser = subparsers.add_parser("ask", help="Ask a question about a document")
    ask_parser.add_argument("document_id")
    ask_parser.add_argument("question")

    combine_parser = subparsers.add_parser("combine", help="Summarise several documents")
    combine_parser.add_argument("document_ids", nargs="+")
    combine_parser.add_argument(
        "--strategy",
        choices=["stuff", "map-reduce"],
        default="stuff",
        help="Combine texts before summarising, or summarise each then combine",
    )

    delete_parser = subparsers.add_parser("delete", help="Delete a document")
    delete_parser.add_argument("document_id")

    return parser


async def _run(args: argparse.Namespace, app: Application) -> int:
    try:
        return await _HANDLERS[args.command](args, app)
    except NotFoundError as exc:
        print(f"Not found: {exc.message}", file=sys.stderr)
        return 1
    except InputError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1
    except LegalLensError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        await app.shutdown()


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.  Exits with status 0 on success."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app = build_application(config_path=args.config, configure_logs=True)
    sys.exit(asyncio.run(_run(args, app)))


if __name__ == "__main__":
    main()
