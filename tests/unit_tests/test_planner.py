"""
Unit tests for patch upgrade planning.
"""

import unittest
from errors import (
    InvalidVersionFormatError,
    MinorVersionMismatchError,
    NoMatchingMinorError,
    NotLatestPatchError,
    PatchDowngradeError,
)
from planner import find_latest_patch, plan_patch_upgrade

CATALOG = ["1.26.9", "1.27.3", "1.27.5", "1.27.6", "1.28.2"]


class TestPlanPatchUpgrade(unittest.TestCase):
    """Test plan_patch_upgrade decisions."""

    def test_allowed_when_desired_is_latest_patch(self):
        decision = plan_patch_upgrade("1.27.3", "1.27.6", CATALOG)
        self.assertTrue(decision.allowed)
        self.assertEqual(decision.target_version, "1.27.6")
        self.assertIsNone(decision.rejection)

    def test_minor_mismatch(self):
        decision = plan_patch_upgrade("1.27.3", "1.28.0", CATALOG)
        self.assertFalse(decision.allowed)
        self.assertIsInstance(decision.rejection, MinorVersionMismatchError)

    def test_patch_downgrade(self):
        decision = plan_patch_upgrade("1.27.5", "1.27.3", CATALOG)
        self.assertIsInstance(decision.rejection, PatchDowngradeError)
        self.assertEqual(decision.rejection.current, "1.27.5")
        self.assertEqual(decision.rejection.desired, "1.27.3")

    def test_not_latest_patch(self):
        decision = plan_patch_upgrade(
            "1.27.3", "1.27.5", ["1.27.3", "1.27.5", "1.27.6"]
        )
        self.assertIsInstance(decision.rejection, NotLatestPatchError)
        self.assertEqual(decision.rejection.latest, "1.27.6")
        self.assertIn("1.27.6", str(decision.rejection))

    def test_no_matching_minor_in_catalog(self):
        decision = plan_patch_upgrade("1.25.1", "1.25.4", CATALOG)
        self.assertIsInstance(decision.rejection, NoMatchingMinorError)

    def test_empty_catalog(self):
        decision = plan_patch_upgrade("1.27.3", "1.27.6", [])
        self.assertIsInstance(decision.rejection, NoMatchingMinorError)

    def test_desired_must_match_catalog_string_exactly(self):
        decision = plan_patch_upgrade("1.27.3", "v1.27.6", CATALOG)
        self.assertIsInstance(decision.rejection, NotLatestPatchError)

    def test_same_version_allowed_when_latest(self):
        decision = plan_patch_upgrade("1.27.6", "1.27.6", CATALOG)
        self.assertTrue(decision.allowed)

    def test_minor_check_happens_before_patch_check(self):
        decision = plan_patch_upgrade("1.27.5", "1.26.9", CATALOG)
        self.assertIsInstance(decision.rejection, MinorVersionMismatchError)

    def test_invalid_versions_raise(self):
        with self.assertRaises(InvalidVersionFormatError):
            plan_patch_upgrade("1", "1.27.6", CATALOG)
        with self.assertRaises(InvalidVersionFormatError):
            plan_patch_upgrade("1.27.3", "1.27", CATALOG)

    def test_invalid_catalog_entry_raises(self):
        with self.assertRaises(InvalidVersionFormatError):
            plan_patch_upgrade("1.27.3", "1.27.6", ["1.27.3", "1.27.x"])


class TestFindLatestPatch(unittest.TestCase):
    """Test the catalog fold."""

    def test_latest_for_minor(self):
        self.assertEqual(find_latest_patch("1.27", CATALOG), "1.27.6")
        self.assertEqual(find_latest_patch("1.28", CATALOG), "1.28.2")

    def test_unsorted_catalog(self):
        self.assertEqual(
            find_latest_patch("1.27", ["1.27.6", "1.27.3", "1.27.5"]), "1.27.6"
        )

    def test_duplicate_patch_keeps_last_seen(self):
        self.assertEqual(find_latest_patch("1.27", ["1.27.6", "v1.27.6"]), "v1.27.6")

    def test_no_match(self):
        self.assertIsNone(find_latest_patch("1.30", CATALOG))


if __name__ == "__main__":
    unittest.main()
