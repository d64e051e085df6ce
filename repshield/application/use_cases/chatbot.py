"""ChatbotUseCase: visitor chat and Telegram conversations through one chatbot."""

from __future__ import annotations

import logging

from repshield.application.ports.chatbot_port import ChatbotPort
from repshield.application.ports.telegram_port import TelegramPort
from repshield.application.services.notification_broadcaster import NotificationBroadcaster

logger = logging.getLogger(__name__)

TELEGRAM_ERROR_REPLY = "Sorry, I encountered an error. Please try again later."


class ChatbotUseCase:
    def __init__(
        self,
        chatbot: ChatbotPort,
        broadcaster: NotificationBroadcaster,
        telegram: TelegramPort | None = None,
    ):
        self._chatbot = chatbot
        self._broadcaster = broadcaster
        self._telegram = telegram

    async def reply(self, message: str, history: list[dict] | None = None, user_info: dict | None = None) -> str:
        response = await self._chatbot.get_response(message, history)
        self._broadcaster.broadcast_chatbot_interaction(message, response, user_info)
        return response

    async def handle_telegram_update(self, update: dict) -> bool:
        """Answer a Telegram text message; updates without text are ignored.

        Returns True when a reply was delivered.
        """
        if self._telegram is None:
            return False
        message = update.get("message") or {}
        text = message.get("text")
        chat_id = (message.get("chat") or {}).get("id")
        if not text or chat_id is None:
            return False

        try:
            answer = await self.reply(
                text, user_info={"source": "telegram", "chatId": chat_id}
            )
        except Exception:
            logger.exception("Error processing Telegram message from chat %s", chat_id)
            answer = TELEGRAM_ERROR_REPLY
        return await self._telegram.send_message(chat_id, answer)
