"""
Unit tests for configuration.
"""

import unittest
from argparse import Namespace
from unittest.mock import patch
from config import UpgraderConfig


def make_args(**overrides):
    values = dict(
        cluster="c-1",
        region="ru-1",
        kube_version="1.27.6",
        token="secret",
        dry_run=True,
        timeout=1800,
        verbose=True,
    )
    values.update(overrides)
    return Namespace(**values)


class TestUpgraderConfig(unittest.TestCase):
    """Test UpgraderConfig data model."""

    def test_config_defaults(self):
        """Test default configuration values."""
        config = UpgraderConfig(
            cluster_id="c-1", region="ru-1", kube_version="1.27.6", token="t"
        )
        self.assertFalse(config.dry_run)
        self.assertEqual(config.timeout, 3600)
        self.assertFalse(config.verbose)

    def test_config_from_args(self):
        """Test creating config from command-line arguments."""
        config = UpgraderConfig.from_args(make_args())

        self.assertEqual(config.cluster_id, "c-1")
        self.assertEqual(config.region, "ru-1")
        self.assertEqual(config.kube_version, "1.27.6")
        self.assertEqual(config.token, "secret")
        self.assertTrue(config.dry_run)
        self.assertEqual(config.timeout, 1800)
        self.assertTrue(config.verbose)

    @patch.dict("os.environ", {"SEL_TOKEN": "from-env"})
    def test_token_from_environment(self):
        config = UpgraderConfig.from_args(make_args(token=None))
        self.assertEqual(config.token, "from-env")

    @patch.dict("os.environ", {"SEL_TOKEN": "from-env"})
    def test_flag_overrides_environment(self):
        config = UpgraderConfig.from_args(make_args(token="flag"))
        self.assertEqual(config.token, "flag")

    @patch.dict("os.environ", {}, clear=True)
    def test_missing_token(self):
        with self.assertRaises(ValueError):
            UpgraderConfig.from_args(make_args(token=None))


if __name__ == "__main__":
    unittest.main()
