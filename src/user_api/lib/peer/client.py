"""HTTP client for the peer service that owns mod/POC assignments."""

from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger

from user_api.lib.discovery.base import ServiceInstance

MOD_POC_PATH = "/poc/mod_id_poc_id/{user_id}"
DEFAULT_TIMEOUT = 10.0


class PeerServiceError(Exception):
    """Raised when the peer service cannot be reached or answers with an error.

    Args:
        message: Human-readable error description.
        status_code: HTTP status code from the peer, if it answered.
        payload: Decoded error body returned by the peer, if any.
    """

    def __init__(self, message: str, status_code: int | None = None, payload: Any = None) -> None:
        self.message = message
        self.status_code = status_code
        self.payload = payload
        super().__init__(message)


def _decode_body(response: httpx.Response) -> Any:
    """Return the JSON body of a response, its text when not JSON, or None when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


async def fetch_mod_poc_id(
    instance: ServiceInstance,
    user_id: str,
    timeout: float = DEFAULT_TIMEOUT,
) -> Any:
    """Fetch the mod/POC identifier for a user from a peer instance.

    Args:
        instance: A resolved, complete peer instance.
        user_id: Public user identifier.
        timeout: Request timeout in seconds.

    Returns:
        The decoded response body, passed through unchanged.

    Raises:
        PeerServiceError: On timeout, connection failure, or a non-2xx answer.
    """
    url = instance.base_url + MOD_POC_PATH.format(user_id=quote(user_id, safe=""))

    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            logger.debug("Fetching mod_poc_id from {}", url)
            response = await client.get(url)
            response.raise_for_status()
    except httpx.TimeoutException as e:
        msg = f"Timeout after {timeout}s fetching mod_poc_id from {instance.base_url}"
        logger.error(msg)
        raise PeerServiceError(msg) from e
    except httpx.HTTPStatusError as e:
        status_code = e.response.status_code
        payload = _decode_body(e.response)
        logger.error(f"Peer service returned HTTP {status_code} for mod_poc_id lookup: {payload}")
        raise PeerServiceError(
            f"Request failed with status code {status_code}",
            status_code=status_code,
            payload=payload,
        ) from e
    except httpx.HTTPError as e:
        msg = f"Connection to peer service at {instance.base_url} failed: {e}"
        logger.error(msg)
        raise PeerServiceError(msg) from e

    return _decode_body(response)
