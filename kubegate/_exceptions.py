# SPDX-FileCopyrightText: Copyright (c) 2023-2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License

from typing import Optional

import httpx


class APITimeoutError(Exception):
    """A timeout has occurred while waiting for a response from the Kubernetes API server."""


class ServerError(Exception):
    """Error from the Kubernetes API server.

    Attributes:
        status: The Status object from the Kubernetes API server
        response: The httpx response object
    """

    def __init__(
        self,
        message: str,
        status: Optional[str] = None,
        response: Optional[httpx.Response] = None,
    ) -> None:
        self.status = status
        self.response = response
        super().__init__(message)


class VersionParseError(ValueError):
    """Unable to parse a Kubernetes version string.

    Attributes:
        raw: The version string that failed to parse
    """

    def __init__(self, message: str, raw: str) -> None:
        self.raw = raw
        super().__init__(message)


class EmptyVersionError(VersionParseError):
    """The version string has no major version."""


class InvalidMajorVersionError(VersionParseError):
    """The major component of the version string is not an integer."""


class UnsupportedVersionError(Exception):
    """The Kubernetes API server is older than the minimum supported version.

    Attributes:
        minimum: The lowest version that is supported
        actual: The version reported by the server
    """

    def __init__(self, minimum, actual) -> None:
        self.minimum = minimum
        self.actual = actual
        super().__init__(
            f"Kubernetes is on version [{actual}], "
            f"but version [{minimum}] or more recent is required"
        )
