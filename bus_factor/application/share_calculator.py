import logging

import aiohttp

from bus_factor.infrastructure.github_client import GitHubRestClient, build_contributors_endpoint
from bus_factor.infrastructure.acl import GitHubTranslator
from bus_factor.domain.exceptions import EmptyContributorsError, ValidationError
from bus_factor.domain.models import UserShare

logger = logging.getLogger(__name__)


class ShareCalculator:
    """
    Computes the share of contributions owned by the most active contributor of a repository.
    """

    def __init__(self, github_client: GitHubRestClient):
        self.github_client = github_client

    async def calculate_share(self, session: aiohttp.ClientSession, endpoint: str, top_k: int) -> UserShare:
        """
        Gets the share of the leader among the top_k most active contributors.

        The total is taken over the fetched contributors only, not over the whole
        history of the repository, so the share is an upper bound that tightens
        as top_k grows.

        Args:
            endpoint (str): The contributors URL of the repository.
            top_k (int): How many contributors to fetch, must be positive.

        Raises:
            ValidationError: top_k is not positive. Raised before any request.
            EmptyContributorsError: GitHub returned no contributions.
            FetchError: The request failed.
        """
        if top_k <= 0:
            raise ValidationError(f"top_k must be a positive integer, got {top_k}.")

        payload = await self.github_client.fetch(session, build_contributors_endpoint(endpoint, top_k))
        contributors = GitHubTranslator.to_contributors(payload)
        if not contributors:
            raise EmptyContributorsError(endpoint)

        total = sum(contributor.contribution_count for contributor in contributors)
        if total == 0:
            raise EmptyContributorsError(endpoint, message="Contributors have no recorded contributions.")

        # GitHub sorts contributors by contributions, descending: the first one is the leader.
        leader = contributors[0]
        share = leader.contribution_count / total
        logger.debug(f"{endpoint}: {leader.login} owns {share:.3f} of {total} contributions.")

        return UserShare(user_name=leader.login, share=share)
