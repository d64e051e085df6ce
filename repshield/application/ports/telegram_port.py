"""Port interface for the admin Telegram channel."""

from abc import ABC, abstractmethod


class TelegramPort(ABC):
    @abstractmethod
    async def send_message(self, chat_id: int, text: str) -> bool:
        ...

    @abstractmethod
    async def send_new_lead_notification(self, lead: dict) -> None:
        ...
