# SPDX-FileCopyrightText: Copyright (c) 2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
from os import PathLike
from typing import Dict, Union

PathType = Union[
    str,
    "PathLike[str]",  # Can remove quotes when Python 3.9 is the minimum version.
]

# A kubeconfig can be loaded from a file or passed in already parsed.
KubeConfigSource = Union[PathType, Dict]
