import aiohttp
import asyncio
import logging
from typing import Any, Optional
from urllib.parse import urlencode

from bus_factor.domain.exceptions import ResponseError, TransportError

logger = logging.getLogger(__name__)

API_URL = "https://api.github.com"
SEARCH_URL = f"{API_URL}/search/repositories"
USER_AGENT = "bus_factor"
REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=60, connect=10)


def build_search_endpoint(topic_filter: str, page: int, per_page: int) -> str:
    """Most starred repositories for a language, one page of them."""
    params = {
        "q": f"language:{topic_filter}",
        "sort": "stars",
        "order": "desc",
        "per_page": per_page,
        "page": page,
    }
    return f"{SEARCH_URL}?{urlencode(params)}"


def build_contributors_endpoint(contributors_url: str, per_page: int) -> str:
    return f"{contributors_url}?per_page={per_page}"


class GitHubRestClient:
    """
    Client for the GitHub REST API.
    Issues a single GET per call and classifies failures; it never retries.
    """

    def __init__(self, token: Optional[str] = None):
        self.headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": USER_AGENT,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    async def fetch(self, session: aiohttp.ClientSession, endpoint: str) -> Any:
        """
        Sends a GET to the endpoint and returns the decoded JSON body.

        Returns:
            The JSON payload; an empty list for 204 No Content (GitHub's answer
            for the contributors of an empty repository).

        Raises:
            ResponseError: GitHub answered with a 4xx/5xx status. Carries the body text.
            TransportError: The request failed or the body is not JSON.
        """
        logger.debug(f"GET {endpoint}")
        try:
            async with session.get(endpoint, headers=self.headers, timeout=REQUEST_TIMEOUT) as response:
                remaining = response.headers.get("X-RateLimit-Remaining")
                if remaining is not None:
                    logger.debug(f"Rate limit remaining: {remaining}")

                if response.status == 204:
                    return []

                if response.status >= 400:
                    # The API response contains useful information about the problem
                    body = await response.text()
                    raise ResponseError(status=response.status, body=body)

                return await response.json()

        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise TransportError(f"Request to {endpoint} failed: {e!r}") from e
