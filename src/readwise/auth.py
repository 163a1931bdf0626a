"""Token authentication against the Readwise API."""

import logging
from typing import Any, Optional

from readwise.client import ReadwiseClient
from readwise.exceptions import AuthenticationError, InvalidHeaderError, ResponseError
from readwise.models import ClientConfig, HTTPMethod

logger = logging.getLogger(__name__)

AUTH_ENDPOINT = "/auth"


def auth(
    access_token: str,
    config: Optional[ClientConfig] = None,
    **kwargs: Any,
) -> ReadwiseClient:
    """Authenticate a Readwise access token and return a client bound to it.

    Args:
        access_token: Token from https://readwise.io/access_token.
        config: Client configuration.
        **kwargs: Forwarded to :class:`ReadwiseClient`.

    Raises:
        InvalidHeaderError: If the token is empty or malformed.
        AuthenticationError: If the server answers with any non-2xx
            status; ``status_code`` holds it.
        RequestError: On network failure.
    """
    if not access_token:
        raise InvalidHeaderError("Access token must be a non-empty string")

    client = ReadwiseClient(access_token, config=config, **kwargs)
    try:
        client.signed_request(AUTH_ENDPOINT, HTTPMethod.GET)
    except ResponseError as e:
        client.close()
        logger.warning("Readwise rejected the access token (HTTP %d)", e.status_code)
        raise AuthenticationError(
            "Readwise rejected the access token",
            status_code=e.status_code,
            response_body=e.response_body,
            headers=e.headers,
        ) from e
    except Exception:
        client.close()
        raise

    logger.info("Readwise access token is valid")
    return client
