# SPDX-FileCopyrightText: Copyright (c) 2023-2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
"""The `kubegate` asynchronous API.

This module provides an asynchronous API for checking and addressing a Kubernetes cluster.
"""
from kubegate._api import Api

from ._api import api
from ._helpers import check_version, namespace_exists, url_for, version

__all__ = [
    "api",
    "check_version",
    "namespace_exists",
    "url_for",
    "version",
    "Api",
]
