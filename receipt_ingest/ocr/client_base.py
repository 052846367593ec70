from abc import ABC, abstractmethod


class BaseOcrClient(ABC):
    """Contract for provider-specific vision chat clients."""

    @abstractmethod
    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        image_url: str,
    ) -> str:
        """Return provider response as plain text."""
