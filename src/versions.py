"""
Kubernetes version parsing and comparison.

Versions look like ``1.27.3`` or ``v1.27.3``. Only the parts needed for a
comparison are validated: minor comparisons need ``major.minor``, patch
comparisons need ``major.minor.patch``.
"""

import re

from errors import InvalidVersionFormatError
from models import Version

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def _split(kube_version: str):
    if kube_version.startswith("v"):
        kube_version = kube_version[1:]
    return kube_version, kube_version.split(".")


def _to_int(kube_version: str, part: str, name: str) -> int:
    if not _INTEGER_RE.fullmatch(part):
        raise InvalidVersionFormatError(
            kube_version, f"{name} part is not an integer number"
        )
    value = int(part)
    if value < 0:
        raise InvalidVersionFormatError(
            kube_version, f"{name} part is a negative number"
        )
    return value


def kube_version_to_minor(kube_version: str) -> str:
    """
    Return the given version trimmed to ``major.minor``.

    Args:
        kube_version: Version string, optionally prefixed with ``v``

    Returns:
        The major and minor parts joined with a dot, as written

    Raises:
        InvalidVersionFormatError: If major or minor part is missing or invalid
    """
    kube_version, parts = _split(kube_version)
    if len(parts) < 2:
        raise InvalidVersionFormatError(
            kube_version, "expected to have major and minor version parts"
        )

    _to_int(kube_version, parts[0], "major")
    _to_int(kube_version, parts[1], "minor")

    return ".".join(parts[:2])


def kube_version_to_patch(kube_version: str) -> int:
    """
    Return the patch part of the given version.

    Raises:
        InvalidVersionFormatError: If the patch part is missing or invalid
    """
    kube_version, parts = _split(kube_version)
    if len(parts) < 3:
        raise InvalidVersionFormatError(
            kube_version, "expected to have major, minor and patch version parts"
        )

    return _to_int(kube_version, parts[2], "patch")


def parse_version(kube_version: str) -> Version:
    """Parse a full ``major.minor.patch`` version."""
    major, minor = kube_version_to_minor(kube_version).split(".")
    patch = kube_version_to_patch(kube_version)
    return Version(major=int(major), minor=int(minor), patch=patch)


def latest_by_patch(a: str, b: str) -> str:
    """
    Return whichever version has the greater patch number.

    Ties return ``b``. Minor versions are not checked, so both versions
    must share the same minor for the result to be meaningful.
    """
    a_patch = kube_version_to_patch(a)
    b_patch = kube_version_to_patch(b)
    if a_patch > b_patch:
        return a
    return b
