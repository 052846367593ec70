"""Example OCR client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseOcrClient and register the provider in OcrDriverFactory.
"""

import json
from typing import ClassVar

from receipt_ingest.ocr.client_base import BaseOcrClient


class ExampleOcrClientAdapter(BaseOcrClient):
    """Returns a fixed receipt reply without any network calls."""

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "vendor": "Uber Trip to Airport",
        "amount": 450,
        "date": "2025-01-15",
        "category": "travel",
    }

    def __init__(self, response: dict[str, object] | None = None) -> None:
        self._response = response if response is not None else self.DEFAULT_RESPONSE

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        image_url: str,
    ) -> str:
        _ = model, temperature, system_prompt, user_prompt, image_url
        return json.dumps(self._response)
