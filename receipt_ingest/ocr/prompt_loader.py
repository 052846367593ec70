from pathlib import Path

from receipt_ingest.ocr.exceptions import OcrError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_system_prompt(path: Path | None = None) -> str:
    """Load the OCR system prompt.

    Args:
        path: Path to the prompt file.
              Defaults to the bundled ocr_system_prompt.txt.

    Raises:
        OcrError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "ocr_system_prompt.txt"
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise OcrError(f"Failed to load OCR prompt: {exc}") from exc
