from typing import List, Tuple, Union
from pydantic import BaseModel, Field, ConfigDict

from bus_factor.domain.exceptions import BusFactorException

class RepoQuery(BaseModel):
    """
    Which repositories to look at: the most starred ones for a language.
    """
    model_config = ConfigDict(frozen=True)

    topic_filter: str = Field(..., description="Language qualifier passed to the search API")
    target_count: int = Field(..., ge=0, description="Number of repositories to collect")


class BusFactorQuery(BaseModel):
    """
    How to compute and filter the bus factor of each repository.
    """
    model_config = ConfigDict(frozen=True)

    dominance_threshold: float = Field(..., ge=0.0, le=1.0, description="Minimum leader share to report")
    # 0 is rejected by the share calculator, not here.
    top_k_contributors: int = Field(..., ge=0, description="Number of top contributors to consider")
    delay_sec: float = Field(0.0, ge=0.0, description="Pause between two requests of one worker")


class RepoRecord(BaseModel):
    """
    Immutable domain model for one repository of the search results.
    """
    model_config = ConfigDict(frozen=True)

    contributors_endpoint: str = Field(..., description="URL of the contributors list")
    name: str = Field(..., description="Name of the repository")
    star_count: int = Field(..., ge=0, description="Total number of stargazers")


class ContributorRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    login: str
    contribution_count: int = Field(..., ge=0)


class UserShare(BaseModel):
    """Share of the contributions owned by the most active contributor."""
    model_config = ConfigDict(frozen=True)

    user_name: str
    share: float


class BusFactorResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    repo_name: str
    star_count: int = Field(..., ge=0)
    leader: UserShare


# Per-repository slot of the worker pool: the share, or the error that prevented it.
ShareOutcome = Union[UserShare, BusFactorException]
RepoOutcome = Tuple[RepoRecord, ShareOutcome]
RepoCollection = List[RepoRecord]
