from typing import Any, Dict, List
from pydantic import ValidationError as PydanticValidationError

from bus_factor.domain.exceptions import PayloadError
from bus_factor.domain.models import ContributorRecord, RepoRecord

class GitHubTranslator:
    """
    Anti-corruption layer that translates raw GitHub REST JSON payloads into domain models.
    Only the handful of fields the bus factor needs are picked out of the (large) responses.
    """

    @staticmethod
    def to_repo_record(raw_item: Dict[str, Any]) -> RepoRecord:
        """
        Transforms one item of a /search/repositories response into a RepoRecord.

        Args:
            raw_item (Dict[str, Any]): The raw JSON item.

        Returns:
            RepoRecord: The domain model instance representing the repository.
        """
        try:
            return RepoRecord(
                contributors_endpoint=raw_item['contributors_url'],
                name=raw_item['name'],
                star_count=raw_item['stargazers_count'],
            )
        except (KeyError, TypeError, PydanticValidationError) as e:
            raise PayloadError(f"Malformed repository item: {e}") from e

    @staticmethod
    def to_contributor(raw_item: Dict[str, Any]) -> ContributorRecord:
        try:
            return ContributorRecord(
                login=raw_item['login'],
                contribution_count=raw_item['contributions'],
            )
        except (KeyError, TypeError, PydanticValidationError) as e:
            raise PayloadError(f"Malformed contributor item: {e}") from e

    @classmethod
    def to_repo_records(cls, payload: Any) -> List[RepoRecord]:
        """Translates a whole search page; the repositories live under 'items'."""
        if not isinstance(payload, dict) or not isinstance(payload.get('items'), list):
            raise PayloadError("Search response has no 'items' list.")
        return [cls.to_repo_record(item) for item in payload['items']]

    @classmethod
    def to_contributors(cls, payload: Any) -> List[ContributorRecord]:
        """Translates a contributors list, keeping upstream order (most active first)."""
        if not isinstance(payload, list):
            raise PayloadError("Contributors response is not a list.")
        return [cls.to_contributor(item) for item in payload]
