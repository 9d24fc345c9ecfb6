import argparse
import asyncio
import os
import sys
import logging
from typing import List, Optional, Sequence
from dotenv import load_dotenv

from bus_factor.infrastructure.github_client import GitHubRestClient
from bus_factor.application.bus_factor_service import BusFactorService
from bus_factor.domain.exceptions import BusFactorException
from bus_factor.domain.models import BusFactorQuery, BusFactorResult, RepoQuery

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.75
DEFAULT_TOP_K = 25
INTER_REQUEST_DELAY = 1.0  # Seconds between requests of one worker to avoid secondary rate limits


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="bus-factor",
        description="Gather bus factor statistics from the most starred GitHub repositories.",
    )
    parser.add_argument("-l", "--language", required=True, help="Programming language name")
    parser.add_argument("-p", "--project-count", type=int, required=True, help="Number of projects to consider")
    parser.add_argument("-t", "--threshold", type=float, default=DEFAULT_THRESHOLD,
                        help="Minimum share of the top contributor to report a project")
    parser.add_argument("-k", "--top-k", type=int, default=DEFAULT_TOP_K,
                        help="Number of top contributors to consider per project")
    parser.add_argument("-d", "--delay", type=float, default=INTER_REQUEST_DELAY,
                        help="Seconds to wait between two requests of the same worker")
    parser.add_argument("--token-path", default=None,
                        help="File holding the GitHub token (defaults to $GITHUB_TOKEN)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def load_token(token_path: Optional[str]) -> Optional[str]:
    """Reads the token from token_path if given, otherwise from the GITHUB_TOKEN variable."""
    if token_path:
        with open(token_path, encoding="utf-8") as f:
            return f.read().strip()
    return os.getenv("GITHUB_TOKEN")


def format_result(result: BusFactorResult) -> str:
    return (
        f"project: {result.repo_name:20} user: {result.leader.user_name:20} "
        f"percentage: {result.leader.share:.2f} stars: {result.star_count}"
    )


def show_results(results: List[BusFactorResult]) -> None:
    for result in results:
        print(format_result(result))


async def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    # Load environment variables from .env file
    load_dotenv()

    try:
        token = load_token(args.token_path)
    except OSError as e:
        logger.error(f"Could not read the token file: {e}")
        return 1

    if not token:
        logger.warning("No GitHub token configured, running unauthenticated with lower rate limits.")

    try:
        repo_query = RepoQuery(topic_filter=args.language, target_count=args.project_count)
        bus_query = BusFactorQuery(
            dominance_threshold=args.threshold,
            top_k_contributors=args.top_k,
            delay_sec=args.delay,
        )
    except ValueError as e:
        logger.error(f"Invalid arguments: {e}")
        return 1

    service = BusFactorService(github_client=GitHubRestClient(token=token))

    try:
        results = await service.run(repo_query, bus_query)
    except BusFactorException as e:
        logger.error(f"Bus factor computation failed: {e}")
        return 1

    show_results(results)
    return 0


def run() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Interrupted by user. Exiting gracefully.")
        sys.exit(130)


if __name__ == "__main__":
    run()
