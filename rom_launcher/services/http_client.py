"""HTTP client service for talking to the MSU randomizer service."""

from typing import Any

import httpx
import structlog

from .errors import MsuServiceError

log = structlog.stdlib.get_logger()


class HttpClientService:
    """Synchronous JSON HTTP client.

    Every request is attempted once and blocks until the service answers;
    no timeout is applied since a shuffle can take arbitrarily long.
    """

    def __init__(
        self,
        base_url: str,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client service.

        Args:
            base_url: Root URL of the service
            transport: Optional transport override (used by tests)
        """
        self.base_url = base_url
        self._client = httpx.Client(
            base_url=base_url,
            timeout=httpx.Timeout(None),
            headers={
                "User-Agent": "Rom-Launcher/0.1",
                "Accept": "application/json",
            },
            follow_redirects=True,
            transport=transport,
        )

        log.debug("HTTP client service initialized", base_url=base_url)

    def get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        """Make a GET request and decode its JSON body.

        Raises:
            MsuServiceError: If the request fails or the body is not JSON
        """
        return self._request("GET", path, params=params)

    def post_json(self, path: str, payload: dict[str, Any]) -> Any:
        """Make a POST request with a JSON body and decode the JSON answer.

        Raises:
            MsuServiceError: If the request fails or the answer is not JSON
        """
        return self._request("POST", path, json=payload)

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
        log.debug("Making HTTP request", method=method, url=url)

        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            log.error(
                "HTTP request rejected",
                method=method,
                url=url,
                status_code=e.response.status_code,
            )
            raise MsuServiceError(
                f"The MSU randomizer service answered {e.response.status_code}",
                operation=f"{method} {path}",
                url=url,
                status_code=e.response.status_code,
                original_error=e,
            ) from e
        except httpx.HTTPError as e:
            log.error(
                "HTTP request failed",
                method=method,
                url=url,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise MsuServiceError(
                "Unable to reach the MSU randomizer service",
                operation=f"{method} {path}",
                url=url,
                original_error=e,
            ) from e

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise MsuServiceError(
                "The MSU randomizer service sent an invalid response",
                operation=f"{method} {path}",
                url=url,
                status_code=response.status_code,
                original_error=e,
            ) from e

    def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        self._client.close()
        log.debug("HTTP client closed")
