import argparse
import asyncio
import json
import mimetypes
import sys
from pathlib import Path

from receipt_ingest.categorization.models import ExpenseCategory
from receipt_ingest.config.settings import Settings
from receipt_ingest.ingestion.models import SessionSnapshot
from receipt_ingest.ingestion.session import build_session
from receipt_ingest.logging.logger import Log
from receipt_ingest.preview.models import FallbackIcon, RasterImage, UploadedFile

_DEFAULT_MEDIA_TYPE = "application/octet-stream"


def load_upload(path: Path, media_type: str | None = None) -> UploadedFile:
    """Read a file from disk as an UploadedFile, guessing its media type."""
    if media_type is None:
        media_type = mimetypes.guess_type(path.name)[0] or _DEFAULT_MEDIA_TYPE
    return UploadedFile(name=path.name, media_type=media_type, data=path.read_bytes())


def snapshot_to_dict(snapshot: SessionSnapshot) -> dict[str, object]:
    preview: dict[str, object]
    if isinstance(snapshot.preview, RasterImage):
        preview = {
            "kind": "image",
            "media_type": snapshot.preview.media_type,
            "width": snapshot.preview.width,
            "height": snapshot.preview.height,
        }
    elif isinstance(snapshot.preview, FallbackIcon):
        preview = {"kind": "icon", "icon": snapshot.preview.kind.value}
    else:
        preview = {"kind": "none"}
    suggestion = snapshot.suggestion
    return {
        "file": snapshot.file_name,
        "preview": preview,
        "headline": snapshot.headline,
        "stage": snapshot.stage.value,
        "progress": snapshot.progress,
        "stages": {anchor.stage.value: status.value for anchor, status in snapshot.stage_statuses},
        "error": snapshot.error,
        "vendor": snapshot.vendor,
        "category": snapshot.category.value if snapshot.category is not None else None,
        "suggestion": (
            {"category": suggestion.category.value, "keyword": suggestion.keyword}
            if suggestion is not None
            else None
        ),
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="receipt-ingest",
        description="Preview a receipt, run OCR and suggest an expense category.",
    )
    parser.add_argument("path", type=Path, help="receipt image or PDF")
    parser.add_argument("--media-type", default=None, help="override the guessed media type")
    parser.add_argument(
        "--category",
        default=None,
        choices=[category.value for category in ExpenseCategory],
        help="category already chosen by the user",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point: load settings -> build session -> ingest one file -> print JSON."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level, stream=sys.stderr)

    try:
        upload = load_upload(args.path, args.media_type)
    except OSError as exc:
        Log.error(f"Cannot read {args.path}: {exc}")
        return 2

    session = build_session(settings)
    if args.category:
        session.set_category(args.category)
    snapshot = asyncio.run(session.ingest(upload))
    print(json.dumps(snapshot_to_dict(snapshot), indent=2))
    return 1 if snapshot.error else 0


if __name__ == "__main__":
    sys.exit(main())
