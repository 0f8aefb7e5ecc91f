from typing import Tuple
import logging
import json

from .formatter import build_message, extract_record, summarize
from .forwarder import WebhookForwarder, forward_alert_message

# Set up logging
logger = logging.getLogger(__name__)

SUCCESS_BODY = "Alert forwarded successfully."

async def process_alert(raw_body: bytes, forwarder: WebhookForwarder) -> Tuple[int, str]:
    """
    Render an alert payload and forward it to the chat webhook

    Args:
        raw_body: The raw request body
        forwarder: The webhook forwarder to dispatch with

    Returns:
        Tuple of (status code, plain-text response body)
    """
    try:
        payload = json.loads(raw_body)
    except (ValueError, RecursionError) as e:
        logger.warning(f"Rejecting malformed alert payload ({len(raw_body)} bytes): {e}")
        return 400, f"Invalid JSON payload: {e}"

    record = extract_record(payload)
    logger.info(f"Processing alert {summarize(record)}")
    message = build_message(payload, record)

    result = await forward_alert_message(message, forwarder)

    if result.success:
        return 200, SUCCESS_BODY

    if result.status_code is not None:
        return 400, f"Failed to forward alert. Webhook returned status code: {result.status_code}"

    if not forwarder.is_configured:
        return 500, "Alert webhook URL is not configured."

    return 502, f"Failed to reach alert webhook: {result.error}"
