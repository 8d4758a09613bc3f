# SPDX-FileCopyrightText: Copyright (c) 2023-2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
"""Utilities for parsing and comparing Kubernetes server versions."""
from __future__ import annotations

import re
from typing import NamedTuple

from ._exceptions import EmptyVersionError, InvalidMajorVersionError

_MAJOR_PATTERN = re.compile(r"[0-9]+")
_LEADING_DIGITS_PATTERN = re.compile(r"[0-9]*")


class VersionTriple(NamedTuple):
    """A ``(major, minor, patch)`` version that compares lexicographically."""

    major: int
    minor: int = 0
    patch: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def _leading_int(segment: str) -> int:
    digits = _LEADING_DIGITS_PATTERN.match(segment).group()  # type: ignore[union-attr]
    return int(digits) if digits else 0


def parse_version(raw: str) -> VersionTriple:
    """Parse a Kubernetes version string into a :class:`VersionTriple`.

    The major component must be an integer. Minor and patch components are
    parsed leniently because managed clusters often append build metadata
    to them, so only their leading digits are used and a missing or
    non-numeric component becomes ``0``.

    Args:
        raw: A version string such as the ``gitVersion`` reported by the API server.

    Returns:
        The parsed version.

    Raises:
        EmptyVersionError: If there is no major version.
        InvalidMajorVersionError: If the major version is not an integer.

    Examples:
        >>> parse_version("v1.9.2-gke.0")
        VersionTriple(major=1, minor=9, patch=2)

        >>> parse_version("v2.0+build123")
        VersionTriple(major=2, minor=0, patch=0)
    """
    version = raw.strip()
    if version and version[0] not in "0123456789":
        version = version[1:]
    major, *rest = version.split(".", 2)
    if not major:
        raise EmptyVersionError(f"No major version found in {raw!r}", raw=raw)
    if not _MAJOR_PATTERN.fullmatch(major):
        raise InvalidMajorVersionError(
            f"Major version {major!r} in {raw!r} is not an integer", raw=raw
        )
    minor, patch = (rest + ["", ""])[:2]
    return VersionTriple(int(major), _leading_int(minor), _leading_int(patch))


def is_compatible(minimum: tuple[int, ...], actual: tuple[int, ...]) -> bool:
    """Check whether a version is at least the minimum version.

    Missing minor or patch numbers count as zero.

    Args:
        minimum: The lowest acceptable version, inclusive.
        actual: The version to check.

    Returns:
        True if ``actual`` is the same as or newer than ``minimum``.
    """
    return VersionTriple(*actual) >= VersionTriple(*minimum)
