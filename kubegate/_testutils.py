# SPDX-FileCopyrightText: Copyright (c) 2023-2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
import contextlib
import os
from typing import Generator


@contextlib.contextmanager
def set_env(**environ: str) -> Generator[None, None, None]:
    """Temporarily set process environment variables.

    Useful for pointing ``KUBECONFIG`` or the in-cluster service variables
    at test fixtures. The original environment is restored on exit.

    Args:
        **environ: The environment variables to set.

    Examples:
        >>> with set_env(KUBECONFIG='/tmp/kubeconfig'):
        ...     "KUBECONFIG" in os.environ
        True
    """
    old_environ = dict(os.environ)
    os.environ.update(environ)
    try:
        yield
    finally:
        os.environ.clear()
        os.environ.update(old_environ)
