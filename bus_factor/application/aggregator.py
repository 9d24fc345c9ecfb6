from typing import Iterable, List

from bus_factor.domain.models import BusFactorResult, RepoOutcome


def aggregate(outcomes: Iterable[RepoOutcome], threshold: float) -> List[BusFactorResult]:
    """
    Joins the shares back to their repositories and keeps those at or above threshold.

    The first failed repository, in input order, is raised as the error of the whole
    computation, even if a later repository failed first in time.
    """
    results: List[BusFactorResult] = []

    for repo, outcome in outcomes:
        if isinstance(outcome, Exception):
            raise outcome

        if outcome.share >= threshold:
            results.append(BusFactorResult(repo_name=repo.name, star_count=repo.star_count, leader=outcome))

    return results
