"""Process-wide services: created with the app, started and stopped by its lifespan."""

from __future__ import annotations

import logging

from repshield.adapters.llm.openai_adapter import OpenAIChatbotAdapter
from repshield.adapters.notifications.sendgrid_email_adapter import SendGridEmailAdapter
from repshield.adapters.notifications.telegram_adapter import TelegramAdapter
from repshield.adapters.reddit.reddit_api_adapter import RedditAPIAdapter
from repshield.adapters.reddit.scrapingbee_adapter import (
    ScrapingBeeClient,
    ScrapingBeeRedditAdapter,
)
from repshield.adapters.web.web_platforms_adapter import WebPlatformsAdapter
from repshield.application.ports.chatbot_port import ChatbotPort
from repshield.application.ports.email_port import EmailPort
from repshield.application.ports.scan_provider_port import ScanProviderPort, WebScanProviderPort
from repshield.application.ports.telegram_port import TelegramPort
from repshield.application.services.notification_broadcaster import NotificationBroadcaster
from repshield.application.services.rate_limiter import SlidingWindowRateLimiter
from repshield.application.services.scan_sessions import ScanSessionStore
from repshield.application.services.side_effects import SideEffectLog, SideEffectRunner
from repshield.application.services.ttl_cache import PeriodicTask
from repshield.application.use_cases.error_recovery import ErrorRecovery
from repshield.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Singleton adapters and in-memory stores shared by all requests."""

    def __init__(
        self,
        config: Settings | None = None,
        *,
        quick_provider: ScanProviderPort | None = None,
        reddit_provider: ScanProviderPort | None = None,
        web_provider: WebScanProviderPort | None = None,
        email: EmailPort | None = None,
        telegram: TelegramPort | None = None,
        chatbot: ChatbotPort | None = None,
    ):
        self.config = config or default_settings

        scrapingbee = ScrapingBeeClient(api_key=self.config.scrapingbee_api_key)
        self.quick_provider = quick_provider or ScrapingBeeRedditAdapter(scrapingbee)
        self.reddit_provider = reddit_provider or RedditAPIAdapter(
            client_id=self.config.reddit_client_id,
            client_secret=self.config.reddit_client_secret,
            user_agent=self.config.reddit_user_agent,
        )
        self.web_provider = web_provider or WebPlatformsAdapter(scrapingbee)
        self.email = email or SendGridEmailAdapter(
            api_key=self.config.sendgrid_api_key,
            admin_email=self.config.sender_email,
            from_email=self.config.from_email,
            app_base_url=self.config.app_base_url,
        )
        self.telegram = telegram or TelegramAdapter(
            bot_token=self.config.telegram_bot_token,
            admin_chat_id=self.config.telegram_admin_chat_id,
        )
        self.chatbot = chatbot or OpenAIChatbotAdapter(
            api_key=self.config.openai_api_key,
            model=self.config.openai_model,
        )

        self.recovery = ErrorRecovery(rate_limit_backoff_seconds=self.config.rate_limit_backoff_seconds)
        self.broadcaster = NotificationBroadcaster(
            max_age_seconds=self.config.notification_channel_max_age_seconds
        )
        self.sessions = ScanSessionStore(ttl_seconds=self.config.scan_session_ttl_seconds)
        self.side_effect_log = SideEffectLog(maxlen=self.config.side_effect_log_size)
        self.side_effects = SideEffectRunner(self.side_effect_log)
        self.scan_limiter = SlidingWindowRateLimiter(
            max_requests=self.config.scan_rate_limit_max,
            window_seconds=self.config.scan_rate_limit_window_seconds,
        )

        self._sweeps = [
            PeriodicTask(
                "scan-session-sweep",
                self.sessions.cleanup,
                self.config.session_sweep_interval_seconds,
            ),
            PeriodicTask(
                "notification-channel-sweep",
                self.broadcaster.cleanup_old_connections,
                self.config.notification_sweep_interval_seconds,
            ),
            PeriodicTask(
                "scan-rate-limit-sweep",
                self.scan_limiter.sweep,
                self.config.rate_limit_sweep_interval_seconds,
            ),
        ]

    def start(self) -> None:
        for task in self._sweeps:
            task.start()
        logger.info("Background sweeps started")

    async def shutdown(self) -> None:
        for task in self._sweeps:
            await task.stop()
        self.broadcaster.shutdown()
        self.sessions.cleanup()
        logger.info("Service container shut down")

    def provider_status(self) -> dict[str, bool]:
        return {
            "redditApi": bool(self.config.reddit_client_id and self.config.reddit_client_secret),
            "scrapingBee": bool(self.config.scrapingbee_api_key),
            "sendGrid": bool(self.config.sendgrid_api_key),
            "telegram": bool(self.config.telegram_bot_token),
            "openai": bool(self.config.openai_api_key),
        }
