"""OpenAI adapter: implements ChatbotPort using the OpenAI API.

Falls back to keyword-matched canned answers whenever the API key is missing
or the call fails, so the chatbot always answers.
"""

from __future__ import annotations

import logging

from openai import AsyncOpenAI

from repshield.application.ports.chatbot_port import ChatbotPort
from repshield.config import settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are the RepShield assistant. RepShield removes unwanted Reddit content
using only legal and ethical methods.

Facts you may use:
- Reddit post removal costs $899, comment removal costs $199.
- Posts are usually removed in 24-48 hours, comments in 24 hours.
- Success rate is 95%+; content that returns within 3 days is removed again for free.
- Visitors can run a free brand scan or submit a Reddit URL for a quote.

Answer in 2-3 short sentences. For lawsuits, emergencies or anything complex,
offer to connect the visitor with a specialist. Never promise outcomes you
cannot guarantee."""

DEFAULT_REPLY = (
    "Hi! I help with Reddit content removal. I can get you a quote in under 60 seconds. "
    "What type of content do you need removed - posts ($899) or comments ($199)?"
)

# (markers, require_all, reply); the first matching rule wins
_CANNED_RULES: list[tuple[tuple[str, ...], bool, str]] = [
    (("complex", "difficult", "urgent", "lawsuit", "emergency", "immediately"), False,
     "This sounds like a complex situation that needs immediate attention. Let me connect you "
     "with our specialist who can provide personalized assistance within minutes."),
    (("price", "cost", "quote"), False,
     "Reddit post removal costs $899 and comments cost $199. We have a 95%+ success rate with "
     "24-48 hour completion. Would you like a custom quote for your specific content?"),
    (("remove", "post"), True,
     "I can help you remove Reddit posts for $899 each. We complete most post removals within "
     "24-48 hours with a 95%+ success rate using only legal methods. Share your Reddit URL for a "
     "detailed quote."),
    (("remove", "comment"), True,
     "Reddit comment removal costs $199 per comment with 24-hour completion time. We use only "
     "legal and ethical methods with a 95%+ success rate. What Reddit comments need removing?"),
    (("how", "process"), False,
     "Our process is simple: 1) Analyze your Reddit content, 2) Provide instant quote, 3) Remove "
     "content within 24-48 hours using legal methods. What content do you need removed?"),
    (("time", "fast", "quick"), False,
     "We remove Reddit posts in 24-48 hours and comments in 24 hours. Our legal removal methods "
     "have a 95%+ success rate. Need something removed urgently?"),
    (("legal", "safe", "method"), False,
     "We only use legal and ethical removal methods with a 95%+ success rate. If content returns "
     "within 3 days, we remove it again for free."),
    (("guarantee", "success"), False,
     "We guarantee a 95%+ success rate for all Reddit removals using legal methods. If content "
     "returns within 3 days, we'll remove it again for free. Ready to get started?"),
    (("reddit.com", "r/"), False,
     "I can analyze that Reddit URL. Removal costs $899 for posts and $199 for comments, with a "
     "95%+ success rate in 24-48 hours. Would you like a detailed analysis and quote?"),
    (("multiple", "bulk", "many", "several"), False,
     "We handle bulk removals with volume discounts. Posts: $899 each, Comments: $199 each. For "
     "5+ items, we offer special pricing. What's the scope of your removal project?"),
]


def canned_reply(message: str) -> str:
    text = (message or "").lower()
    for markers, require_all, reply in _CANNED_RULES:
        hit = all(m in text for m in markers) if require_all else any(m in text for m in markers)
        if hit:
            return reply
    return DEFAULT_REPLY


class OpenAIChatbotAdapter(ChatbotPort):
    """Chat completions with a canned-answer fallback."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_history: int = 10,
    ):
        self._api_key = api_key if api_key is not None else settings.openai_api_key
        self._model = model or settings.openai_model
        self._max_history = max_history
        self._client = AsyncOpenAI(api_key=self._api_key) if self._api_key.strip() else None

    async def get_response(self, message: str, history: list[dict] | None = None) -> str:
        if self._client is None:
            logger.debug("OPENAI_API_KEY is not set. Using canned reply.")
            return canned_reply(message)

        messages = [{"role": "system", "content": SYSTEM_PROMPT}]
        for turn in (history or [])[-self._max_history:]:
            role = turn.get("role")
            content = turn.get("content")
            if role in ("user", "assistant") and content:
                messages.append({"role": role, "content": str(content)})
        messages.append({"role": "user", "content": message})

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=0.4,
                max_tokens=250,
            )
            reply = (response.choices[0].message.content or "").strip()
            if reply:
                return reply
            logger.warning("Empty chatbot completion, using canned reply")
        except Exception:
            logger.exception("Chatbot completion failed, using canned reply")
        return canned_reply(message)
