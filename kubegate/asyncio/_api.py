# SPDX-FileCopyrightText: Copyright (c) 2023-2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
from typing import Optional

import httpx

from kubegate._api import Api as _AsyncApi
from kubegate._api import _thread_loop_id, hash_kwargs
from kubegate._types import KubeConfigSource


async def api(
    url: Optional[str] = None,
    kubeconfig: Optional[KubeConfigSource] = None,
    serviceaccount: Optional[str] = None,
    namespace: Optional[str] = None,
    context: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    _asyncio: bool = True,
) -> _AsyncApi:
    """Create a `kubegate.asyncio.Api` object for interacting with the Kubernetes API.

    If a kubegate object already exists with the same arguments in this thread and
    event loop, it will be returned.

    Args:
        url: The URL of the Kubernetes API server
        kubeconfig: The path to a kubeconfig file, or a parsed kubeconfig dict
        serviceaccount: The path of a service account to use
        namespace: The namespace to use
        context: The context to use
        transport: The httpx transport to send requests through

    Returns:
        kubegate.asyncio.Api: The API object

    Examples:
        >>> import kubegate
        >>> api = await kubegate.asyncio.api()  # Uses the default kubeconfig
        >>> print(await api.version())  # Get the Kubernetes version
    """
    from kubegate import Api as _SyncApi

    _cls: type[_AsyncApi]
    if _asyncio:
        _cls = _AsyncApi
    else:
        _cls = _SyncApi

    async def _f(**kwargs) -> _AsyncApi:
        key = hash_kwargs(kwargs)
        thread_loop_id = _thread_loop_id()
        instances = _cls._instances.get(thread_loop_id)
        if instances is not None:
            # The registry is shared with the sync class, so filter by type
            matching = [a for a in instances.values() if type(a) is _cls]
            if key in instances and type(instances[key]) is _cls:
                return await instances[key]
            if all(k is None for k in kwargs.values()) and matching:
                return await matching[0]
        return await _cls(**kwargs, bypass_factory=True)

    return await _f(
        url=url,
        kubeconfig=kubeconfig,
        serviceaccount=serviceaccount,
        namespace=namespace,
        context=context,
        transport=transport,
    )
