# SPDX-FileCopyrightText: Copyright (c) 2025, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
from ._versioning import VersionTriple

KUBERNETES_MINIMUM_SUPPORTED_VERSION = VersionTriple(1, 8, 0)

# Seconds to wait for a response from the API server
DEFAULT_TIMEOUT = 5
