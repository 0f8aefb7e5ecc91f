"""
Chat Webhook Forwarder

Posts a rendered alert message to the configured chat webhook:
1. Wraps the Markdown text as {"text": ...}
2. Sends a single POST with a bounded timeout
3. Reports the downstream outcome without retrying

"""

import asyncio
import logging
import httpx
import os
from typing import Optional
from urllib.parse import urlsplit

from .models import OutboundMessage, ForwardResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0  # seconds

def _timeout_from_env() -> float:
    raw = os.environ.get("ALERT_WEBHOOK_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Invalid ALERT_WEBHOOK_TIMEOUT '{raw}', using {DEFAULT_TIMEOUT}s")
        return DEFAULT_TIMEOUT
    if value <= 0:
        logger.warning(f"Non-positive ALERT_WEBHOOK_TIMEOUT '{raw}', using {DEFAULT_TIMEOUT}s")
        return DEFAULT_TIMEOUT
    return value

class WebhookForwarder:
    """Forwards alert messages to a chat webhook"""

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.webhook_url = webhook_url or os.environ.get("ALERT_WEBHOOK_URL", "")
        self.timeout = timeout if timeout is not None else _timeout_from_env()
        self.transport = transport

        # The webhook URL usually embeds a secret, only the host is ever logged
        self.display_url = urlsplit(self.webhook_url).netloc or "<unconfigured>"

    @property
    def is_configured(self) -> bool:
        return bool(self.webhook_url)

    async def send(self, message: OutboundMessage) -> ForwardResult:
        """
        Post a message to the chat webhook

        Args:
            message: The outbound {"text": ...} body

        Returns:
            ForwardResult describing the downstream outcome
        """
        if not self.is_configured:
            logger.error("❌ ALERT_WEBHOOK_URL is not configured")
            return ForwardResult(
                success=False,
                message="Alert webhook URL is not configured",
                error="missing ALERT_WEBHOOK_URL",
            )

        body = message.model_dump_json()
        logger.info(f"🚀 FORWARDING TO: {self.display_url} ({len(body)} bytes)")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                # Per-phase httpx timeouts do not cap the whole exchange
                response = await asyncio.wait_for(
                    client.post(
                        self.webhook_url,
                        content=body,
                        headers={"Content-Type": "application/json"}
                    ),
                    timeout=self.timeout
                )
        except asyncio.TimeoutError:
            logger.error(f"❌ TIMEOUT: {self.display_url} did not respond within {self.timeout}s")
            return ForwardResult(
                success=False,
                message=f"Timed out forwarding to {self.display_url}",
                error=f"no response within {self.timeout}s",
                target_url=self.display_url
            )
        except httpx.RequestError as e:
            logger.error(f"❌ NETWORK ERROR: Failed to forward to {self.display_url}: {str(e) or type(e).__name__}")
            return ForwardResult(
                success=False,
                message=f"Network error forwarding to {self.display_url}",
                error=str(e) or type(e).__name__,
                target_url=self.display_url
            )

        logger.info(f"✅ FORWARDED TO: {self.display_url} -> STATUS: {response.status_code}")

        if response.is_success:
            return ForwardResult(
                success=True,
                status_code=response.status_code,
                message=f"Successfully forwarded to {self.display_url}",
                target_url=self.display_url
            )

        logger.warning(f"⚠️ WARNING: {self.display_url} returned {response.status_code}: {response.text[:500]}")
        return ForwardResult(
            success=False,
            status_code=response.status_code,
            message=f"{self.display_url} returned {response.status_code}",
            error=response.text,
            target_url=self.display_url
        )

async def forward_alert_message(text: str, forwarder: Optional[WebhookForwarder] = None) -> ForwardResult:
    """
    Utility function to post a rendered alert to the webhook
    Can be called from anywhere when needed
    """
    forwarder = forwarder or WebhookForwarder()
    return await forwarder.send(OutboundMessage(text=text))
