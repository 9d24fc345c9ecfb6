import asyncio
import logging
from typing import List, Tuple

import aiohttp

from bus_factor.infrastructure.github_client import GitHubRestClient, build_search_endpoint
from bus_factor.infrastructure.acl import GitHubTranslator
from bus_factor.domain.models import RepoCollection, RepoQuery, RepoRecord

logger = logging.getLogger(__name__)

# GitHub's search API returns at most 100 items per page
PAGE_LIMIT = 100


def plan_pages(target_count: int) -> Tuple[int, int]:
    """For a number of repositories returns the count of full pages and the residual."""
    return target_count // PAGE_LIMIT, target_count % PAGE_LIMIT


class RepoCollectionFetcher:
    """
    Collects the N most starred repositories of a language.

    Every page is requested concurrently; the pages are then stitched back together
    in page order, so the collection keeps GitHub's descending star ranking
    whatever order the responses arrive in.
    """

    def __init__(self, github_client: GitHubRestClient):
        self.github_client = github_client

    async def _fetch_page(
        self, session: aiohttp.ClientSession, topic_filter: str, page: int, per_page: int,
    ) -> List[RepoRecord]:
        endpoint = build_search_endpoint(topic_filter, page=page, per_page=per_page)
        payload = await self.github_client.fetch(session, endpoint)
        return GitHubTranslator.to_repo_records(payload)

    async def fetch_repos(self, session: aiohttp.ClientSession, query: RepoQuery) -> RepoCollection:
        """
        Fetches query.target_count repositories, most starred first.

        Fails fast: the first page error is raised and no partial collection is returned.
        Duplicates across pages (the ranking may shift between requests) are kept.
        """
        full_pages, remainder = plan_pages(query.target_count)
        if full_pages == 0 and remainder == 0:
            return []

        tasks = [
            self._fetch_page(session, query.topic_filter, page, PAGE_LIMIT)
            for page in range(1, full_pages + 1)
        ]
        if remainder:
            # Keep the page size of the full pages, otherwise page N+1 would point
            # at a different slice of the ranking.
            per_page = PAGE_LIMIT if full_pages else remainder
            tasks.append(self._fetch_page(session, query.topic_filter, full_pages + 1, per_page))

        logger.info(
            f"Fetching {query.target_count} '{query.topic_filter}' repositories "
            f"in {len(tasks)} page(s)."
        )
        pages = await asyncio.gather(*tasks)

        repos: RepoCollection = []
        for page in pages[:full_pages]:
            repos.extend(page)
        if remainder:
            repos.extend(pages[full_pages][:remainder])

        if len(repos) < query.target_count:
            logger.warning(
                f"GitHub returned only {len(repos)} of {query.target_count} requested repositories."
            )
        return repos
