"""
Resend Email Client

Sends transactional and campaign email through the Resend HTTP API.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from core.config import EmailConfig

from ..protocols import EmailDeliveryError

logger = logging.getLogger(__name__)


class ResendEmailClient:
    """Client for the Resend /emails endpoint"""

    def __init__(
        self,
        config: Optional[EmailConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or EmailConfig()
        self.default_from_address = self.config.from_address

        # HTTP client - support DI
        if http_client is not None:
            self.http_client = http_client
        else:
            self.http_client = httpx.AsyncClient(
                base_url=self.config.resend_base_url,
                headers={
                    "Authorization": f"Bearer {self.config.resend_api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.config.timeout_seconds,
            )

    async def send_email(
        self,
        to: str,
        subject: str,
        html: str,
        from_address: Optional[str] = None,
        text: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> Optional[str]:
        """
        Send one email.

        Args:
            to: Recipient address
            subject: Subject line
            html: HTML body
            from_address: Sender (defaults to EMAIL_FROM_ADDRESS)
            text: Optional plain text body
            reply_to: Optional Reply-To header value

        Returns:
            Provider message id

        Raises:
            EmailDeliveryError: transport failure or non-2xx answer
        """
        email_data: Dict[str, Any] = {
            "from": from_address or self.default_from_address,
            "to": [to],
            "subject": subject,
            "html": html,
        }
        if text:
            email_data["text"] = text
        if reply_to:
            email_data["reply_to"] = reply_to

        try:
            response = await self.http_client.post("/emails", json=email_data)
        except httpx.HTTPError as e:
            raise EmailDeliveryError(f"Email provider unreachable: {e}")

        if response.status_code >= 400:
            raise EmailDeliveryError(self._error_message(response), status_code=response.status_code)

        try:
            return response.json().get("id")
        except ValueError:
            return None

    def _error_message(self, response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"Email provider returned {response.status_code}"
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return f"Email provider returned {response.status_code}"

    async def close(self) -> None:
        await self.http_client.aclose()


__all__ = ["ResendEmailClient"]
