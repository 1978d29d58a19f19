"""Outbound message dispatchers.

Delivery is best effort: there is no receipt and no retry. Callers go through
``dispatch_safely`` so a relay failure never fails the operation that caused
the message.
"""

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import requests

logger = logging.getLogger(__name__)

CALLMEBOT_URL = "https://api.callmebot.com/whatsapp.php"
DEFAULT_TIMEOUT = 10


class DispatchError(RuntimeError):
    """The relay refused or failed to accept a message."""


@dataclass(frozen=True)
class Notification:
    """A templated text addressed to a phone number."""

    phone: str
    message: str


class Dispatcher(ABC):
    """Sends a text message to a contact phone."""

    @abstractmethod
    def send(self, notification: Notification) -> None:
        """Send the notification.

        Raises:
            DispatchError: If the relay rejects the message
        """
        pass


class LogDispatcher(Dispatcher):
    """Simulated delivery that only writes the message to the log."""

    def __init__(self):
        self.sent: list[Notification] = []

    def send(self, notification: Notification) -> None:
        logger.info("[SIMULATION] Sending WhatsApp to %s: %s", notification.phone, notification.message)
        self.sent.append(notification)


class CallMeBotDispatcher(Dispatcher):
    """WhatsApp delivery through the CallMeBot relay."""

    def __init__(
        self,
        api_key: str,
        url: str = CALLMEBOT_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, notification: Notification) -> None:
        params = {
            "phone": notification.phone,
            "text": notification.message,
            "apikey": self.api_key,
        }
        try:
            resp = self.session.get(self.url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise DispatchError(f"Relay request failed: {e}") from e
        if not resp.ok:
            raise DispatchError(f"Relay returned HTTP {resp.status_code}: {resp.text[:200]}")
        logger.info("Sent WhatsApp message to %s", notification.phone)


def dispatch_safely(dispatcher: Dispatcher, notification: Notification) -> bool:
    """Send a notification, logging instead of raising on failure.

    Returns:
        True if the dispatcher accepted the message
    """
    try:
        dispatcher.send(notification)
    except (DispatchError, requests.RequestException) as e:
        logger.error("Could not notify %s: %s", notification.phone, e)
        return False
    except Exception:
        logger.exception("Unexpected failure notifying %s", notification.phone)
        return False
    return True


def create_dispatcher(api_key: Optional[str] = None) -> Dispatcher:
    """Create the configured dispatcher.

    Args:
        api_key: CallMeBot API key. If None, checks FISCALCONTROL_CALLMEBOT_API_KEY;
            without a key messages are only logged
    """
    if api_key is None:
        api_key = os.environ.get("FISCALCONTROL_CALLMEBOT_API_KEY")
    if api_key:
        return CallMeBotDispatcher(api_key)
    return LogDispatcher()
