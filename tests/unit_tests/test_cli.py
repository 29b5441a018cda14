"""
Unit tests for CLI module.
"""

import unittest
from unittest.mock import MagicMock, patch
from cli import build_parser, main
from models import UpgradeResult

BASE_ARGS = ["--cluster", "c-1", "--region", "ru-1", "--kube-version", "1.27.6"]


class TestCLI(unittest.TestCase):
    """Test CLI argument parsing and entry point."""

    def test_build_parser_defaults(self):
        args = build_parser().parse_args(BASE_ARGS)

        self.assertEqual(args.cluster, "c-1")
        self.assertEqual(args.region, "ru-1")
        self.assertEqual(args.kube_version, "1.27.6")
        self.assertIsNone(args.token)
        self.assertIsNone(args.log_file)
        self.assertFalse(args.dry_run)
        self.assertEqual(args.timeout, 3600)
        self.assertFalse(args.verbose)

    def test_parser_with_all_options(self):
        args = build_parser().parse_args(
            BASE_ARGS
            + ["--token", "t", "--dry-run", "--timeout", "900", "--verbose"]
        )

        self.assertEqual(args.token, "t")
        self.assertTrue(args.dry_run)
        self.assertEqual(args.timeout, 900)
        self.assertTrue(args.verbose)

    def test_parser_requires_cluster(self):
        with self.assertRaises(SystemExit):
            build_parser().parse_args(["--region", "ru-1", "--kube-version", "1.27.6"])

    def test_parser_rejects_unknown_region(self):
        with self.assertRaises(SystemExit):
            build_parser().parse_args(
                ["--cluster", "c-1", "--region", "eu-1", "--kube-version", "1.27.6"]
            )

    @patch("cli.ClusterUpgrader")
    @patch("cli.MKSRestClient")
    @patch("cli.setup_logging")
    def test_main_success(self, mock_setup_logging, mock_client_class, mock_upgrader_class):
        mock_upgrader = MagicMock()
        mock_upgrader.run.return_value = UpgradeResult(cluster_id="c-1", status="success")
        mock_upgrader_class.return_value = mock_upgrader

        result = main(BASE_ARGS + ["--token", "t", "--dry-run"])

        self.assertEqual(result, 0)
        mock_client_class.assert_called_once_with(token="t", region="ru-1")
        mock_upgrader.run.assert_called_once_with(
            "c-1", "1.27.6", timeout=3600, dry_run=True
        )

    @patch("cli.ClusterUpgrader")
    @patch("cli.MKSRestClient")
    @patch("cli.setup_logging")
    def test_main_returns_error_code_on_failure(
        self, mock_setup_logging, mock_client_class, mock_upgrader_class
    ):
        for status, code in [("failed", 1), ("rejected", 1), ("up_to_date", 0)]:
            mock_upgrader_class.return_value.run.return_value = UpgradeResult(
                cluster_id="c-1", status=status
            )
            self.assertEqual(main(BASE_ARGS + ["--token", "t"]), code)

    @patch("cli.ClusterUpgrader")
    @patch("cli.MKSRestClient")
    @patch("cli.setup_logging")
    def test_main_passes_log_file(
        self, mock_setup_logging, mock_client_class, mock_upgrader_class
    ):
        mock_upgrader_class.return_value.run.return_value = UpgradeResult(
            cluster_id="c-1", status="success"
        )

        main(BASE_ARGS + ["--token", "t", "--log-file", "/tmp/mks.log"])

        mock_setup_logging.assert_called_once_with(verbose=False, log_file="/tmp/mks.log")

    @patch("cli.setup_logging")
    def test_main_log_file_error_exits(self, mock_setup_logging):
        mock_setup_logging.side_effect = PermissionError("read-only")

        with self.assertRaises(SystemExit):
            main(BASE_ARGS + ["--token", "t", "--log-file", "/ro/mks.log"])

    @patch.dict("os.environ", {}, clear=True)
    @patch("cli.setup_logging")
    def test_main_without_token_exits(self, mock_setup_logging):
        with self.assertRaises(SystemExit):
            main(BASE_ARGS)


if __name__ == "__main__":
    unittest.main()
