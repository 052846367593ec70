from typing import ClassVar

from receipt_ingest.config.settings import Settings
from receipt_ingest.ocr.base import BaseOcrDriver
from receipt_ingest.ocr.client_base import BaseOcrClient
from receipt_ingest.ocr.driver import ChatOcrDriver
from receipt_ingest.ocr.example_client_adapter import ExampleOcrClientAdapter
from receipt_ingest.ocr.openai_client_adapter import OpenAIOcrClientAdapter


class OcrDriverFactory:
    """Creates the configured OCR driver."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseOcrDriver:
        provider = settings.ocr_provider.lower()
        return ChatOcrDriver(
            client=cls._create_client(provider, settings),
            model=settings.ocr_model_name,
            temperature=settings.ocr_temperature,
        )

    @classmethod
    def _create_client(cls, provider: str, settings: Settings) -> BaseOcrClient:
        if provider == "example":
            return ExampleOcrClientAdapter()
        return OpenAIOcrClientAdapter(
            api_key=settings.ocr_api_key,
            timeout_seconds=settings.ocr_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.ocr_base_url.strip()
            if not url:
                raise ValueError(
                    "ocr_base_url is required for ocr_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return settings.ocr_base_url.strip() or default_base_url
        supported = ["example", "openai", "openai_compatible", *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS)]
        raise ValueError(f"Unknown OCR provider '{provider}'. Choose from: {supported}")
