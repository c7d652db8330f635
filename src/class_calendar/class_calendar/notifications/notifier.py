from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx

from ..core.exceptions import NotifierError

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def send(self, *, to: str, subject: str, html: str) -> None:
        """Deliver one email. Raises NotifierError when delivery fails."""

        raise NotImplementedError


class HttpEmailNotifier(Notifier):
    """Sends email through an HTTP email API (JSON body, bearer key)."""

    def __init__(
        self,
        *,
        api_url: str,
        api_key: str,
        sender: str,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        self._api_url = api_url
        self._api_key = api_key
        self._sender = sender
        self._timeout = timeout
        self._client = client

    def send(self, *, to: str, subject: str, html: str) -> None:
        if not self._api_url or not self._api_key:
            raise NotifierError("Email delivery is not configured")

        payload = {"from": self._sender, "to": [to], "subject": subject, "html": html}
        headers = {"Authorization": f"Bearer {self._api_key}"}
        try:
            if self._client is not None:
                response = self._client.post(self._api_url, json=payload, headers=headers, timeout=self._timeout)
            else:
                with httpx.Client(timeout=self._timeout) as client:
                    response = client.post(self._api_url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("email to %s rejected: status=%s body=%s", to, exc.response.status_code, exc.response.text)
            raise NotifierError("Error sending email") from exc
        except httpx.HTTPError as exc:
            logger.error("email to %s failed: %s", to, exc)
            raise NotifierError("Error sending email") from exc
        logger.info("email %r sent to %s", subject, to)


class ConsoleNotifier(Notifier):
    """Development notifier: logs the email instead of sending it."""

    def send(self, *, to: str, subject: str, html: str) -> None:
        logger.info("[dev email] to=%s subject=%r\n%s", to, subject, html)
