from fastapi import Security, HTTPException
from fastapi.security import APIKeyHeader, APIKeyQuery
from starlette.status import HTTP_403_FORBIDDEN
import hmac
import os
from typing import Optional
import logging

# Set up logging
logger = logging.getLogger(__name__)

# Function key, accepted as a header or as the ?code= query parameter
function_key_header = APIKeyHeader(name="x-functions-key", auto_error=False)
function_key_query = APIKeyQuery(name="code", auto_error=False)

async def verify_function_key(
    header_key: Optional[str] = Security(function_key_header),
    query_key: Optional[str] = Security(function_key_query),
) -> Optional[str]:
    """
    Validate the static function key

    When FUNCTION_KEY is unset, access control is left to the hosting
    environment and every request is accepted.

    Args:
        header_key: The key from the x-functions-key header
        query_key: The key from the code query parameter

    Returns:
        The validated key, or None when no key is configured

    Raises:
        HTTPException: If the key is missing or invalid
    """
    expected = os.environ.get("FUNCTION_KEY")
    if not expected:
        return None

    provided = header_key or query_key
    if not provided:
        logger.warning("Missing function key in request")
        raise HTTPException(
            status_code=HTTP_403_FORBIDDEN, detail="Missing function key"
        )

    if not hmac.compare_digest(provided.encode(), expected.encode()):
        logger.warning("Invalid function key provided")
        raise HTTPException(
            status_code=HTTP_403_FORBIDDEN, detail="Invalid function key"
        )

    return provided
