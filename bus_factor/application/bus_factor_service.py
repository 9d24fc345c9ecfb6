import logging
from typing import List

import aiohttp

from bus_factor.infrastructure.github_client import GitHubRestClient
from bus_factor.application.repo_fetcher import RepoCollectionFetcher
from bus_factor.application.share_calculator import ShareCalculator
from bus_factor.application.worker_pool import DEFAULT_WORKER_COUNT, WorkerPool
from bus_factor.application.aggregator import aggregate
from bus_factor.domain.models import BusFactorQuery, BusFactorResult, RepoQuery

logger = logging.getLogger(__name__)

# Limit concurrent connections; page fetches are otherwise launched all at once
CONNECTOR_LIMIT = 10


class BusFactorService:
    """
    Service orchestrating the bus factor computation: fetch the most starred
    repositories, compute the leader share of each, and keep the dominated ones.
    """

    def __init__(
            self,
            github_client: GitHubRestClient,
            worker_count: int = DEFAULT_WORKER_COUNT,
    ):
        self.repo_fetcher = RepoCollectionFetcher(github_client)
        self.worker_pool = WorkerPool(ShareCalculator(github_client), worker_count=worker_count)

    async def run(self, repo_query: RepoQuery, bus_query: BusFactorQuery) -> List[BusFactorResult]:
        """
        Runs the whole pipeline in a single HTTP session.

        Raises:
            BusFactorException: The first error met, pages first, then repositories in rank order.
        """
        async with aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(limit=CONNECTOR_LIMIT),
        ) as session:
            repos = await self.repo_fetcher.fetch_repos(session, repo_query)
            logger.info(f"Got {len(repos)} repositories.")

            outcomes = await self.worker_pool.run(session, repos, bus_query)

        results = aggregate(outcomes, bus_query.dominance_threshold)
        logger.info(
            f"{len(results)} of {len(repos)} repositories have a leader above "
            f"{bus_query.dominance_threshold:.2f}."
        )
        return results
