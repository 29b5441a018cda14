"""
Pytest configuration for the MKS patch upgrader tests.

Puts src/ on sys.path so tests import the top-level modules
(`versions`, `planner`, `watcher`, ...) directly.
"""

import os
import sys

ROOT_DIR = os.path.dirname(__file__)
SRC_DIR = os.path.join(ROOT_DIR, "src")

if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)
