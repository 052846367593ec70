import httpx
import openai

from receipt_ingest.ocr.client_base import BaseOcrClient
from receipt_ingest.ocr.exceptions import OcrError, OcrNetworkError

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
CREDITS_EXHAUSTED_MESSAGE = "AI credits exhausted. Please add credits to your workspace."


class OpenAIOcrClientAdapter(BaseOcrClient):
    """Vision OCR client built on the OpenAI-compatible chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        image_url: str,
    ) -> str:
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": user_prompt},
                            {"type": "image_url", "image_url": {"url": image_url}},
                        ],
                    },
                ],
            )
        except openai.RateLimitError as exc:
            raise OcrNetworkError(RATE_LIMIT_MESSAGE) from exc
        except openai.APIStatusError as exc:
            if exc.status_code == 402:
                raise OcrNetworkError(CREDITS_EXHAUSTED_MESSAGE) from exc
            raise OcrNetworkError(f"AI processing failed: {exc}") from exc
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise OcrNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise OcrNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise OcrError("No response from AI")
        content = response.choices[0].message.content
        if not content:
            raise OcrError("No response from AI")
        return content
