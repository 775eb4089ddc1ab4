import json
import unittest
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from ainews.cli import cli
from ainews.models import ArchiveResult
from ainews.pipeline import PipelineResult


class CliTests(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()

    @patch("ainews.cli.build_pipeline")
    def test_fetch_writes_active_and_prints_stats(self, mock_build):
        pipeline = MagicMock()
        pipeline.run.return_value = PipelineResult(simple_mode=True)
        mock_build.return_value = pipeline

        result = self.runner.invoke(cli, ["fetch", "--source", "japan", "--limit", "3", "--simple"])

        self.assertEqual(result.exit_code, 0, result.output)
        pipeline.run.assert_called_once_with("japan", limit_per_source=3)
        pipeline.write_active.assert_called_once_with([])
        self.assertTrue(mock_build.call_args.kwargs["simple"])
        payload = json.loads(next(line for line in result.output.splitlines() if line.startswith("{")))
        self.assertEqual(payload["mode"], "japan")

    @patch("ainews.cli.build_pipeline", side_effect=RuntimeError("boom"))
    def test_fetch_failure_exits_1(self, _mock_build):
        result = self.runner.invoke(cli, ["fetch"])
        self.assertEqual(result.exit_code, 1)

    def test_unknown_source_rejected(self):
        result = self.runner.invoke(cli, ["fetch", "--source", "twitter"])
        self.assertNotEqual(result.exit_code, 0)

    @patch("ainews.cli.run_archive", return_value=ArchiveResult(archived=2, remaining=5))
    def test_archive(self, _mock_archive):
        result = self.runner.invoke(cli, ["archive"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("Archived: 2, Remaining: 5", result.output)


if __name__ == "__main__":
    unittest.main()
