from fastapi import FastAPI, Depends, Request
from fastapi.responses import PlainTextResponse
from typing import Optional
import time
import logging
import os
from .security import verify_function_key
from .processor import process_alert
from .forwarder import WebhookForwarder

VERSION = "1.0.0"

# Configure logging
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Get environment
ENVIRONMENT = os.environ.get("ENVIRONMENT", "development").lower()
if ENVIRONMENT not in ["development", "production"]:
    ENVIRONMENT = "development"

app = FastAPI(
    title="Alert Webhook Relay",
    description="Relays security alerts to a chat webhook as Markdown messages",
    version=VERSION
)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Middleware to log requests and responses"""
    request_id = str(time.time())
    logger.info(f"Request {request_id} started: {request.method} {request.url.path}")
    start_time = time.time()

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(f"Request {request_id} completed in {process_time:.2f}s with status {response.status_code}")

    return response

def get_forwarder() -> WebhookForwarder:
    """Build a forwarder from the current environment"""
    return WebhookForwarder()

@app.post("/alert", response_class=PlainTextResponse)
async def alert_endpoint(
    request: Request,
    function_key: Optional[str] = Depends(verify_function_key),
    forwarder: WebhookForwarder = Depends(get_forwarder)
):
    """
    Relay a security alert to the chat webhook

    The body is read raw so malformed JSON gets a plain 400 instead of a
    validation error.
    """
    body = await request.body()
    logger.info(f"🔥 ALERT RECEIVED: {len(body)} bytes")

    status_code, message = await process_alert(body, forwarder)

    if status_code == 200:
        logger.info("✅ ALERT RELAYED")
    else:
        logger.warning(f"⚠️ ALERT NOT RELAYED ({status_code}): {message}")

    return PlainTextResponse(message, status_code=status_code)

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "environment": ENVIRONMENT,
        "timestamp": time.time(),
        "version": VERSION
    }
