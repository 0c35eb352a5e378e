"""HTTP implementation of the Fetcher port."""

import logging

import httpx

from ..application.domain import Fetcher, ResourceKind
from ..application.exceptions import NetworkError

_LIST_EXTENSION = ".txt"


class HttpFetcher(Fetcher):
    """A fetcher that downloads blocklists as text with a single GET."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        timeout: float,
        user_agent: str,
    ):
        """Initializes the fetcher adapter."""
        self.logger = logging.getLogger(self.__class__.__name__)
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent

    def url_for(self, kind: ResourceKind) -> str:
        return f"{self.base_url}/{kind.path_segment}{_LIST_EXTENSION}"

    async def _execute_fetch(self, url: str) -> bytes:
        """Executes the raw HTTP GET request."""
        headers = {"User-Agent": self.user_agent}
        response = await self.client.get(
            url, headers=headers, timeout=self.timeout
        )
        response.raise_for_status()
        return response.content

    async def fetch(self, kind: ResourceKind) -> str:
        """
        Fetch the whole body of a blocklist.

        This method serves as the public contract fulfillment for the
        Fetcher port. The body is buffered in memory and must be UTF-8.

        Args:
            kind: The blocklist to fetch.

        Returns:
            The body of the response as text.

        Raises:
            NetworkError: If the request fails, the server answers with an
                          error status, or the body cannot be decoded.
        """

        url = self.url_for(kind)

        try:
            raw = await self._execute_fetch(url)
        except httpx.HTTPError as e:
            raise NetworkError(url, f"{type(e).__name__}: {e}") from e

        try:
            body = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise NetworkError(url, f"body is not valid UTF-8: {e}") from e

        self.logger.debug(f"Fetched {len(raw)} bytes from {url}")
        return body
