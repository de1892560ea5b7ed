import re
import httpx
import logging
from typing import Any, Dict, Optional

from medora import config

logger = logging.getLogger(__name__)

_EXPO_TOKEN_RE = re.compile(r"^Expo(nent)?PushToken\[.+\]$")


def is_expo_push_token(token: Optional[str]) -> bool:
    return bool(token) and bool(_EXPO_TOKEN_RE.match(token))


class ExpoPushClient:
    """
    Delivers notifications to the Expo push service.

    Delivery is best-effort: the notification already lives in the store,
    so HTTP failures are logged and reported as ``False``.
    """

    def __init__(
        self,
        url: str = config.EXPO_PUSH_URL,
        enabled: bool = config.PUSH_ENABLED,
        timeout: float = config.PUSH_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.enabled = enabled
        self.timeout = timeout
        self._transport = transport
        if not enabled:
            logger.info("Expo push disabled (MEDORA_PUSH_ENABLED not set); notifications stay in-app only.")

    async def send(
        self,
        token: Optional[str],
        title: str,
        body: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Push one message. Returns True when Expo accepted it."""
        if not self.enabled:
            return False
        if not is_expo_push_token(token):
            logger.warning(f"Skipping push: invalid Expo token {token!r}")
            return False

        message = {
            "to": token,
            "sound": "default",
            "title": title,
            "body": body,
            "data": data or {"title": title, "message": body},
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.url,
                    json=[message],
                    headers={"Accept": "application/json"},
                )
            if response.status_code != 200:
                logger.error(f"Expo push error {response.status_code}: {response.text}")
                return False
            tickets = response.json().get("data", [])
            failed = [t for t in tickets if t.get("status") == "error"]
            if failed:
                logger.warning(f"Expo rejected push: {failed[0].get('message')}")
                return False
            logger.info(f"Push sent: {title}")
            return True
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Expo push request failed: {e}")
            return False
