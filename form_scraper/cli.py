"""Command-line interface for scraping form documents to JSON.

Provides subcommands for scraping a single document and for processing
a folder of documents, writing one JSON file per document.
"""

import argparse
import json
import mimetypes
import sys
import time
from pathlib import Path

from form_scraper.scraper import FormScraper
from form_scraper.utils.config import load_config
from form_scraper.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

_SUPPORTED_EXTENSIONS = (
    "*.png",
    "*.jpg",
    "*.jpeg",
    "*.tiff",
    "*.tif",
    "*.bmp",
    "*.pdf",
    "*.docx",
)
_SUMMARY_FILENAME = "summary.json"


def _find_documents(input_dir: Path) -> list[Path]:
    """Find all supported document files in a directory.

    Args:
        input_dir: Directory to scan for documents.

    Returns:
        Sorted list of document file paths.
    """
    files: list[Path] = []
    for ext in _SUPPORTED_EXTENSIONS:
        files.extend(input_dir.glob(ext))
        files.extend(input_dir.glob(ext.upper()))
    return sorted(set(files))


def _guess_mime_type(file_path: Path) -> str | None:
    mime_type, _ = mimetypes.guess_type(file_path.name)
    return mime_type


def scrape_file(
    file_path: Path,
    scraper: FormScraper,
    title: str = "",
    document_type: str = "",
) -> dict[str, object]:
    """Scrape a single document file into a JSON-ready dict.

    Args:
        file_path: Path to the document file.
        scraper: Form scraper instance.
        title: Form title; defaults to the file stem.
        document_type: Document type label.

    Returns:
        Scrape result with the source filename added.
    """
    result = scraper.scrape(
        file_path.read_bytes(),
        _guess_mime_type(file_path),
        title=title or file_path.stem,
        document_type=document_type,
    )
    output = {"filename": file_path.name}
    output.update(result.to_dict())
    return output


def process_folder(
    input_dir: Path,
    output_dir: Path,
    document_type: str = "",
    verbose: bool = False,
) -> dict[str, int]:
    """Scrape every document in a folder, one JSON file per document.

    Args:
        input_dir: Directory containing document files.
        output_dir: Directory receiving ``<stem>.json`` files and a summary.
        document_type: Document type label applied to every file.
        verbose: Whether to print per-file progress.

    Returns:
        Summary dict with total, successful, and failed counts.
    """
    scraper = FormScraper(load_config())

    files = _find_documents(input_dir)
    if not files:
        logger.warning("No documents found in %s", input_dir)
        return {"total": 0, "successful": 0, "failed": 0}

    logger.info("Found %d documents to process", len(files))
    output_dir.mkdir(parents=True, exist_ok=True)

    entries: list[dict[str, object]] = []
    successful = 0
    failed = 0

    for i, file_path in enumerate(files, 1):
        if verbose:
            print(f"Processing [{i}/{len(files)}]: {file_path.name}")

        start_time = time.time()
        try:
            result = scrape_file(file_path, scraper, document_type=document_type)
        except Exception as exc:
            logger.error("Failed to process %s: %s", file_path.name, exc)
            entries.append(
                {"filename": file_path.name, "status": "failed", "error": str(exc)}
            )
            failed += 1
            continue

        output_path = output_dir / f"{file_path.stem}.json"
        output_path.write_text(json.dumps(result, indent=2))
        entries.append(
            {
                "filename": file_path.name,
                "status": "success",
                "output": output_path.name,
                "field_count": len(result["fields"]),
                "processing_time_s": round(time.time() - start_time, 2),
            }
        )
        successful += 1

    summary = {"total": len(files), "successful": successful, "failed": failed}
    _write_summary(summary, entries, output_dir / _SUMMARY_FILENAME)
    _print_summary(summary, output_dir)
    return summary


def _write_summary(
    summary: dict[str, int], entries: list[dict[str, object]], output_path: Path
) -> None:
    """Write batch counts and per-file status to a JSON file."""
    payload = dict(summary)
    payload["documents"] = entries
    output_path.write_text(json.dumps(payload, indent=2))
    logger.info("Summary written to %s", output_path)


def _print_summary(summary: dict[str, int], output_dir: Path) -> None:
    """Print batch processing summary to stdout.

    Args:
        summary: Counts of total, successful, and failed documents.
        output_dir: Directory holding the JSON output.
    """
    print(f"\n{'=' * 50}")
    print("Batch Processing Complete")
    print(f"{'=' * 50}")
    print(f"Total:      {summary['total']}")
    print(f"Successful: {summary['successful']}")
    print(f"Failed:     {summary['failed']}")
    print(f"Output:     {output_dir}")


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="Form Scraper",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    single_parser = subparsers.add_parser("scrape", help="Scrape a single document")
    single_parser.add_argument("file", type=Path, help="Document file to scrape")
    single_parser.add_argument(
        "-t",
        "--type",
        default="",
        dest="doc_type",
        help="Document type label, e.g. passport",
    )
    single_parser.add_argument("--title", default="", help="Form title")
    single_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    batch_parser = subparsers.add_parser("batch", help="Scrape a folder of documents")
    batch_parser.add_argument(
        "input_dir", type=Path, help="Input directory with documents"
    )
    batch_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("results"),
        help="Output directory (default: results)",
    )
    batch_parser.add_argument(
        "-t",
        "--type",
        default="",
        dest="doc_type",
        help="Document type label applied to every file",
    )
    batch_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    args = parser.parse_args(argv)

    setup_logging()

    if args.command == "batch":
        if not args.input_dir.is_dir():
            print(f"Error: {args.input_dir} is not a directory", file=sys.stderr)
            sys.exit(1)
        process_folder(args.input_dir, args.output, args.doc_type, args.verbose)
    elif args.command == "scrape":
        if not args.file.exists():
            print(f"Error: {args.file} does not exist", file=sys.stderr)
            sys.exit(1)
        scraper = FormScraper(load_config())
        result = scrape_file(args.file, scraper, args.title, args.doc_type)
        output_str = json.dumps(result, indent=2)
        if args.output:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(output_str)
            print(f"Output written to {args.output}")
        else:
            print(output_str)
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()
