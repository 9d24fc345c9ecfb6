import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import AsyncMock, MagicMock, patch

from bus_factor.domain.exceptions import ResponseError
from bus_factor.domain.models import BusFactorResult, UserShare
from bus_factor.main import format_result, load_token, main, parse_args


class TestArgs(unittest.TestCase):
    def test_defaults(self) -> None:
        args = parse_args(["--language", "rust", "--project-count", "50"])

        self.assertEqual(args.language, "rust")
        self.assertEqual(args.project_count, 50)
        self.assertEqual(args.threshold, 0.75)
        self.assertEqual(args.top_k, 25)
        self.assertEqual(args.delay, 1.0)
        self.assertIsNone(args.token_path)

    def test_token_from_file_is_stripped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, ".token")
            with open(path, "w", encoding="utf-8") as f:
                f.write("secret-token\n")

            self.assertEqual(load_token(path), "secret-token")

    def test_token_from_environment(self) -> None:
        with patch.dict(os.environ, {"GITHUB_TOKEN": "env-token"}):
            self.assertEqual(load_token(None), "env-token")

    def test_format_result(self) -> None:
        result = BusFactorResult(
            repo_name="hello",
            star_count=1234,
            leader=UserShare(user_name="octocat", share=0.8123),
        )

        line = format_result(result)

        self.assertTrue(line.startswith("project: hello "))
        self.assertIn("user: octocat ", line)
        self.assertIn("percentage: 0.81", line)
        self.assertTrue(line.endswith("stars: 1234"))


class TestMain(unittest.IsolatedAsyncioTestCase):
    async def test_prints_results(self) -> None:
        service = MagicMock()
        service.run = AsyncMock(return_value=[
            BusFactorResult(repo_name="hello", star_count=10, leader=UserShare(user_name="octocat", share=0.9)),
        ])
        out = io.StringIO()

        with patch("bus_factor.main.load_dotenv"), \
                patch("bus_factor.main.BusFactorService", return_value=service) as service_cls, \
                redirect_stdout(out):
            code = await main(["-l", "rust", "-p", "3", "-k", "10", "-d", "0"])

        self.assertEqual(code, 0)
        self.assertIn("project: hello", out.getvalue())
        repo_query, bus_query = service.run.await_args.args
        self.assertEqual(repo_query.target_count, 3)
        self.assertEqual(bus_query.top_k_contributors, 10)
        self.assertEqual(bus_query.delay_sec, 0.0)
        service_cls.assert_called_once()

    async def test_pipeline_error_exits_with_failure(self) -> None:
        service = MagicMock()
        service.run = AsyncMock(side_effect=ResponseError(status=422, body="Validation Failed"))

        with patch("bus_factor.main.load_dotenv"), \
                patch("bus_factor.main.BusFactorService", return_value=service), \
                self.assertLogs("bus_factor.main", level="ERROR") as logs:
            code = await main(["-l", "asdf", "-p", "1"])

        self.assertEqual(code, 1)
        self.assertIn("Validation Failed", "\n".join(logs.output))

    async def test_invalid_threshold_exits_with_failure(self) -> None:
        with patch("bus_factor.main.load_dotenv"), \
                patch("bus_factor.main.BusFactorService") as service_cls:
            code = await main(["-l", "rust", "-p", "1", "-t", "1.5"])

        self.assertEqual(code, 1)
        service_cls.assert_not_called()

    async def test_missing_token_file_exits_with_failure(self) -> None:
        with patch("bus_factor.main.load_dotenv"), \
                patch("bus_factor.main.BusFactorService") as service_cls:
            code = await main(["-l", "rust", "-p", "1", "--token-path", "/nonexistent/.token"])

        self.assertEqual(code, 1)
        service_cls.assert_not_called()
