"""
Lolytics Auto Accept - Notification Manager
Mirrors activity log entries to Telegram so accepted matches and failures
reach the player's phone.
"""
import threading
import logging
import requests
from typing import Iterable, Optional

from autoaccept.activity_log import ActivityLog, LogEntry, Severity


SEVERITY_ICONS = {
    Severity.INFO: "ℹ️",
    Severity.SUCCESS: "✅",
    Severity.ERROR: "❌",
}


class NotificationManager:
    """
    Forwards selected ActivityLog entries to Telegram.
    Sending happens in a background thread; failures are only logged.
    """

    def __init__(
        self,
        telegram_token: str = "",
        telegram_chat_id: str = "",
        severities: Iterable[str] = ("success", "error"),
        proxy_config: Optional[dict] = None,
        timeout: float = 10.0,
    ):
        self.telegram_token = telegram_token
        self.telegram_chat_id = telegram_chat_id
        self.severities = frozenset(Severity(s) for s in severities)
        self.proxy_config = proxy_config
        self.timeout = timeout
        self._log: Optional[ActivityLog] = None

    @classmethod
    def from_settings(cls, settings) -> "NotificationManager":
        return cls(
            telegram_token=settings.telegram_token,
            telegram_chat_id=settings.telegram_chat_id,
            severities=settings.notify_severities,
        )

    @property
    def telegram_enabled(self) -> bool:
        """Check if Telegram is configured"""
        return bool(self.telegram_token and self.telegram_chat_id)

    # ==================== ACTIVITY LOG ====================

    def attach(self, activity_log: ActivityLog):
        """Start mirroring activity_log"""
        self.detach()
        activity_log.add_listener(self.on_entry)
        self._log = activity_log

    def detach(self):
        if self._log is not None:
            self._log.remove_listener(self.on_entry)
            self._log = None

    def should_forward(self, entry: LogEntry) -> bool:
        return self.telegram_enabled and entry.severity in self.severities

    def on_entry(self, entry: LogEntry):
        if not self.should_forward(entry):
            return
        icon = SEVERITY_ICONS.get(entry.severity, "")
        self._send_telegram_async(
            f"{icon} <b>Lolytics Auto Accept</b>\n"
            f"{entry.message}\n"
            f"Time: {entry.capture_time.strftime('%Y-%m-%d %H:%M:%S')}"
        )

    # ==================== TELEGRAM ====================

    def send_telegram(self, message: str, parse_mode: str = "HTML") -> bool:
        """Send a Telegram message, blocking. Returns True on HTTP success."""
        if not self.telegram_enabled:
            return False
        try:
            url = f"https://api.telegram.org/bot{self.telegram_token}/sendMessage"
            resp = requests.post(
                url,
                data={
                    "chat_id": self.telegram_chat_id,
                    "text": message,
                    "parse_mode": parse_mode
                },
                timeout=self.timeout,
                proxies=self.proxy_config
            )
            if resp.status_code != 200:
                logging.debug(f"Telegram send returned {resp.status_code}")
                return False
            return True
        except requests.RequestException as e:
            logging.debug(f"Telegram send error: {e}")
            return False

    def _send_telegram_async(self, message: str, parse_mode: str = "HTML") -> threading.Thread:
        """Send Telegram message in background thread"""
        thread = threading.Thread(
            target=self.send_telegram,
            args=(message, parse_mode),
            daemon=True,
            name="TelegramNotify"
        )
        thread.start()
        return thread
