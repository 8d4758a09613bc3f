# SPDX-FileCopyrightText: Copyright (c) 2023-2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
from typing import Dict, Optional, Tuple, Union

import httpx

from kubegate._api import Api
from kubegate._versioning import VersionTriple

from ._api import api as _api


async def version(api=None, _asyncio=True) -> dict:
    if api is None:
        api = await _api(_asyncio=_asyncio)
    return await api.async_version()


async def check_version(
    version_info: Optional[Union[Dict, str]] = None,
    minimum: Optional[Tuple[int, int, int]] = None,
    api=None,
    _asyncio=True,
) -> VersionTriple:
    if api is None:
        api = await _api(_asyncio=_asyncio)
    return await api.async_check_version(version_info, minimum=minimum)


async def namespace_exists(namespace: str, api=None, _asyncio=True) -> bool:
    if api is None:
        api = await _api(_asyncio=_asyncio)
    return await api.async_namespace_exists(namespace)


async def url_for(
    namespace: str, extra_path: str, api=None, _asyncio=True
) -> httpx.URL:
    if api is None:
        api = await _api(_asyncio=_asyncio)
    return api.url_for(namespace, extra_path)


version.__doc__ = Api.version.__doc__
check_version.__doc__ = Api.check_version.__doc__
namespace_exists.__doc__ = Api.namespace_exists.__doc__
url_for.__doc__ = Api.url_for.__doc__
