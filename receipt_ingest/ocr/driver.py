"""Receipt OCR driver backed by a vision chat model."""

import asyncio
import base64
import json
import re
from pathlib import Path

from receipt_ingest.logging.logger import Log
from receipt_ingest.ocr.base import BaseOcrDriver, StageReporter
from receipt_ingest.ocr.client_base import BaseOcrClient
from receipt_ingest.ocr.exceptions import OcrError
from receipt_ingest.ocr.models import ExtractedFields
from receipt_ingest.ocr.prompt_loader import load_system_prompt
from receipt_ingest.ocr.validator import validate_and_build
from receipt_ingest.preview.models import UploadedFile
from receipt_ingest.tracking.stages import OcrStage

USER_PROMPT = "Extract the vendor, amount, date, and category from this receipt image."

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


class ChatOcrDriver(BaseOcrDriver):
    """Sends the receipt to a vision chat model and parses its JSON reply."""

    def __init__(
        self,
        *,
        client: BaseOcrClient,
        model: str,
        temperature: float = 0.0,
        system_prompt_path: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._system_prompt = load_system_prompt(system_prompt_path)

    async def extract(self, file: UploadedFile, report: StageReporter) -> ExtractedFields:
        report(OcrStage.UPLOADING, 20, None)
        image_url = self._to_data_url(file)

        report(OcrStage.ANALYZING, 60, None)
        Log.info(f"Processing OCR for {file.name}")
        raw_response = await asyncio.to_thread(self._call_ai, image_url)
        Log.debug(f"AI raw response:\n{raw_response}")

        report(OcrStage.EXTRACTING, 90, None)
        fields = validate_and_build(self._parse_json(raw_response))

        report(OcrStage.COMPLETE, 100, None)
        Log.info(f"OCR complete for {file.name}: vendor={fields.vendor!r}")
        return fields

    def _call_ai(self, image_url: str) -> str:
        return self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=USER_PROMPT,
            image_url=image_url,
        )

    @staticmethod
    def _to_data_url(file: UploadedFile) -> str:
        encoded = base64.b64encode(file.data).decode("ascii")
        return f"data:{file.media_type};base64,{encoded}"

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        match = _JSON_OBJECT.search(cleaned)
        if match is not None:
            cleaned = match.group(0)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise OcrError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise OcrError("JSON response must be an object")
        return parsed
