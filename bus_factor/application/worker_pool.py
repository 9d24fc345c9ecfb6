import asyncio
import logging
import math
from typing import List

import aiohttp

from bus_factor.application.share_calculator import ShareCalculator
from bus_factor.domain.exceptions import BusFactorException
from bus_factor.domain.models import BusFactorQuery, RepoCollection, RepoOutcome, ShareOutcome

logger = logging.getLogger(__name__)

# Number of repositories processed concurrently
DEFAULT_WORKER_COUNT = 5


def partition(repos: RepoCollection, worker_count: int) -> List[RepoCollection]:
    """Splits repos into worker_count contiguous chunks; trailing chunks may be short or empty."""
    size = math.ceil(len(repos) / worker_count)
    return [repos[i * size:(i + 1) * size] for i in range(worker_count)]


class WorkerPool:
    """
    Runs the share calculator over a collection of repositories with a fixed number of workers.

    Each worker walks its own contiguous chunk sequentially, pausing between requests
    to stay clear of GitHub's secondary rate limits. Workers only ever touch their own
    chunk and their own result list, which are concatenated once all of them are done.
    """

    def __init__(self, share_calculator: ShareCalculator, worker_count: int = DEFAULT_WORKER_COUNT):
        if worker_count <= 0:
            raise ValueError("worker_count must be positive.")
        self.share_calculator = share_calculator
        self.worker_count = worker_count

    async def _work_chunk(
        self, session: aiohttp.ClientSession, worker_id: int, chunk: RepoCollection, query: BusFactorQuery,
    ) -> List[RepoOutcome]:
        outcomes: List[RepoOutcome] = []

        for position, repo in enumerate(chunk):
            if position and query.delay_sec > 0:
                await asyncio.sleep(query.delay_sec)

            try:
                outcome: ShareOutcome = await self.share_calculator.calculate_share(
                    session, repo.contributors_endpoint, query.top_k_contributors,
                )
            except BusFactorException as e:
                # Kept in the repository's slot; the aggregator decides what to do with it.
                logger.debug(f"[worker {worker_id}] {repo.name} failed: {e}")
                outcome = e

            outcomes.append((repo, outcome))

        logger.debug(f"[worker {worker_id}] Done with {len(chunk)} repositories.")
        return outcomes

    async def run(
        self, session: aiohttp.ClientSession, repos: RepoCollection, query: BusFactorQuery,
    ) -> List[RepoOutcome]:
        """
        Computes one outcome per repository, in the order of repos.

        Returns:
            List of (repository, UserShare or the exception raised for it).
        """
        chunks = partition(repos, self.worker_count)
        logger.info(
            f"Calculating bus factor for {len(repos)} repositories "
            f"with {self.worker_count} workers."
        )

        per_worker = await asyncio.gather(*(
            self._work_chunk(session, worker_id, chunk, query)
            for worker_id, chunk in enumerate(chunks)
        ))

        return [outcome for outcomes in per_worker for outcome in outcomes]
