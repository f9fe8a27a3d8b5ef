"""First-party username/password login over HTTP."""
import json
import logging

import httpx

from .errors import ResponseDecodeError, ServerRejectedError, TransportError
from .schemas import AuthRequest

logger = logging.getLogger(__name__)


class DirectAuthService:
    """Sends a built ``AuthRequest`` to the login endpoint.

    Status 200 is a successful login; anything else is rejected. A 200
    response that declares JSON must carry a decodable body. No timeout is
    set here, so the client's default applies.
    """

    def __init__(self, http_client: httpx.Client | None = None):
        self._client = http_client or httpx.Client()
        self._owns_client = http_client is None

    def send(self, request: AuthRequest) -> dict:
        """Issue the request and return the decoded response body.

        Returns:
            The JSON body as a dict, or an empty dict when the server sent
            no JSON.

        Raises:
            TransportError: The request failed before a response arrived.
            ServerRejectedError: The server answered with a non-200 status.
            ResponseDecodeError: The 200 response body could not be decoded.
        """
        try:
            resp = self._client.request(
                request.method,
                request.url,
                content=request.body,
                headers=dict(request.headers),
            )
        except httpx.HTTPError as e:
            logger.warning("Direct login transport error: %s", e)
            raise TransportError(str(e) or type(e).__name__) from e

        if resp.status_code != 200:
            logger.info("Direct login rejected with status %s", resp.status_code)
            raise ServerRejectedError(resp.status_code)

        return self._decode(resp)

    @staticmethod
    def _decode(resp: httpx.Response) -> dict:
        content_type = resp.headers.get("content-type", "")
        if "json" not in content_type or not resp.content:
            return {}
        try:
            data = resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ResponseDecodeError(str(e)) from e
        return data if isinstance(data, dict) else {"data": data}

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
