"""Port interface for the visitor-facing chatbot."""

from abc import ABC, abstractmethod


class ChatbotPort(ABC):
    @abstractmethod
    async def get_response(self, message: str, history: list[dict] | None = None) -> str:
        """Answer a visitor message. Never raises; falls back to a canned reply."""
        ...
