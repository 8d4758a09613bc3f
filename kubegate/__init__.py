# SPDX-FileCopyrightText: Copyright (c) 2023-2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
"""
This module contains `kubegate`, a minimal access layer to the Kubernetes API.

It builds an authenticated client, checks that the API server is recent enough,
checks whether namespaces exist and builds namespace scoped resource URLs.

At the top level, `kubegate` provides a synchronous API that wraps the asynchronous API
provided by `kubegate.asyncio`. Both APIs have the same method signatures and return values.
"""
from functools import partial, update_wrapper
from typing import Optional, Union

import httpx

from . import asyncio
from ._api import Api as _AsyncApi
from ._async_utils import run_sync as _run_sync
from ._async_utils import sync as _sync
from ._constants import KUBERNETES_MINIMUM_SUPPORTED_VERSION
from ._exceptions import (
    APITimeoutError,
    EmptyVersionError,
    InvalidMajorVersionError,
    ServerError,
    UnsupportedVersionError,
    VersionParseError,
)
from ._types import KubeConfigSource
from ._versioning import VersionTriple, is_compatible, parse_version
from .asyncio import (
    api as _api,
)
from .asyncio import (
    check_version as _check_version,
)
from .asyncio import (
    namespace_exists as _namespace_exists,
)
from .asyncio import (
    url_for as _url_for,
)
from .asyncio import (
    version as _k8s_version,
)

try:
    from ._version import version as __version__  # noqa
    from ._version import version_tuple as __version_tuple__  # noqa
except ImportError:
    __version__ = "0.0.0"
    __version_tuple__ = (0, 0, 0)


@_sync
class Api(_AsyncApi):
    __doc__ = _AsyncApi.__doc__


def api(
    url: Optional[str] = None,
    kubeconfig: Optional[KubeConfigSource] = None,
    serviceaccount: Optional[str] = None,
    namespace: Optional[str] = None,
    context: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Union[Api, _AsyncApi]:
    """Create a :class:`kubegate.Api` object for interacting with the Kubernetes API.

    If a kubegate object already exists with the same arguments, it will be returned.

    Args:
        url: The URL of the Kubernetes API server
        kubeconfig: The path to a kubeconfig file, or a parsed kubeconfig dict
        serviceaccount: The path of a service account to use
        namespace: The namespace to use
        context: The context to use
        transport: The httpx transport to send requests through

    Returns:
        The API object

    Examples:
        >>> import kubegate
        >>> api = kubegate.api()  # Uses the default kubeconfig
        >>> api.check_version()  # Raises if the cluster is too old
    """
    ret = _run_sync(_api)(
        url=url,
        kubeconfig=kubeconfig,
        serviceaccount=serviceaccount,
        namespace=namespace,
        context=context,
        transport=transport,
        _asyncio=False,
    )
    assert isinstance(ret, (Api, _AsyncApi))
    return ret


version = _run_sync(partial(_k8s_version, _asyncio=False))
update_wrapper(version, _k8s_version)
check_version = _run_sync(partial(_check_version, _asyncio=False))
update_wrapper(check_version, _check_version)
namespace_exists = _run_sync(partial(_namespace_exists, _asyncio=False))
update_wrapper(namespace_exists, _namespace_exists)
url_for = _run_sync(partial(_url_for, _asyncio=False))
update_wrapper(url_for, _url_for)

__all__ = [
    "__version__",
    "__version_tuple__",
    "KUBERNETES_MINIMUM_SUPPORTED_VERSION",
    "api",
    "asyncio",
    "check_version",
    "is_compatible",
    "namespace_exists",
    "parse_version",
    "url_for",
    "version",
    "Api",
    "APITimeoutError",
    "EmptyVersionError",
    "InvalidMajorVersionError",
    "ServerError",
    "UnsupportedVersionError",
    "VersionParseError",
    "VersionTriple",
]
