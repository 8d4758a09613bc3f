# SPDX-FileCopyrightText: Copyright (c) 2023-2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
from __future__ import annotations

import asyncio
import contextlib
import copy
import json
import logging
import threading
import weakref
from typing import AsyncGenerator

import httpx

from ._auth import KubeAuth
from ._constants import DEFAULT_TIMEOUT, KUBERNETES_MINIMUM_SUPPORTED_VERSION
from ._exceptions import (
    APITimeoutError,
    ServerError,
    UnsupportedVersionError,
)
from ._versioning import VersionTriple, is_compatible, parse_version

logger = logging.getLogger(__name__)


class Api:
    """A kubegate object for interacting with the Kubernetes API.

    .. warning::
        This class is not intended to be instantiated directly. Instead, use the
        :func:`kubegate.api` function to get a cached instance of the API.

    Attributes:
        minimum_version: The oldest server version :meth:`check_version` accepts.
    """

    _asyncio = True
    _instances: dict[str, weakref.WeakValueDictionary] = {}

    def __init__(self, **kwargs) -> None:
        if not kwargs.pop("bypass_factory", False):
            raise ValueError("Use kubegate.api() to get an instance of Api.")

        self._url = kwargs.get("url")
        self._kubeconfig = kwargs.get("kubeconfig")
        self._serviceaccount = kwargs.get("serviceaccount")
        self._transport: httpx.AsyncBaseTransport | None = kwargs.get("transport")
        self._session: httpx.AsyncClient | None = None
        self._timeout: float | None = DEFAULT_TIMEOUT
        self.minimum_version: VersionTriple = KUBERNETES_MINIMUM_SUPPORTED_VERSION
        self.auth = KubeAuth(
            url=self._url,
            kubeconfig=self._kubeconfig,
            serviceaccount=self._serviceaccount,
            namespace=kwargs.get("namespace"),
            context=kwargs.get("context"),
        )
        thread_loop_id = _thread_loop_id()
        if thread_loop_id not in Api._instances:
            Api._instances[thread_loop_id] = weakref.WeakValueDictionary()
        key = hash_kwargs(kwargs)
        Api._instances[thread_loop_id][key] = self

    def __await__(self):
        async def f():
            await self.auth
            return self

        return f().__await__()

    @property
    def timeout(self):
        return self._timeout

    @timeout.setter
    def timeout(self, value):
        self._timeout = value
        if self._session:
            self._session.timeout = value

    async def _create_session(self) -> None:
        headers = {"User-Agent": self.__version__, "content-type": "application/json"}
        if self.auth.token:
            headers["Authorization"] = f"Bearer {self.auth.token}"
        if self._session:
            with contextlib.suppress(RuntimeError):
                await self._session.aclose()
            self._session = None
        logger.debug(f"Creating HTTP session for {self.auth.server}")
        self._session = httpx.AsyncClient(
            base_url=self.auth.server,
            headers=headers,
            verify=await self.auth.ssl_context(),
            timeout=self._timeout,
            follow_redirects=True,
            transport=self._transport,
        )

    def _construct_url(
        self,
        version: str = "v1",
        base: str = "",
        namespace: str | None = None,
        url: str = "",
    ) -> str:
        if not base:
            if version == "v1":
                base = "/api"
            elif "/" in version:
                base = "/apis"
            else:
                raise ValueError("Unknown API version, base must be specified.")
        parts = [base]
        if version:
            parts.append(version)
        if namespace:
            parts.extend(["namespaces", namespace])
        if url:
            parts.append(url)
        return "/".join(parts)

    @contextlib.asynccontextmanager
    async def call_api(
        self,
        method: str = "GET",
        version: str = "v1",
        base: str = "",
        namespace: str | None = None,
        url: str = "",
        raise_for_status: bool = True,
        **kwargs,
    ) -> AsyncGenerator[httpx.Response, None]:
        """Make a Kubernetes API request."""
        if not self._session or self._session.is_closed:
            await self._create_session()
        assert self._session
        url = self._construct_url(version, base, namespace, url)
        kwargs.update(url=url, method=method)
        if self.auth.tls_server_name:
            kwargs["extensions"] = {"sni_hostname": self.auth.tls_server_name}
        try:
            response = await self._session.request(**kwargs)
            if raise_for_status:
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            if 400 <= e.response.status_code < 500:
                try:
                    error = e.response.json()
                    error_message = error.get("message", str(e))
                except json.JSONDecodeError:
                    error = e.response.text
                    error_message = str(e)
                raise ServerError(
                    error_message, status=error, response=e.response
                ) from e
            elif e.response.status_code >= 500:
                raise ServerError(
                    str(e),
                    status=str(e.response.status_code),
                    response=e.response,
                ) from e
            raise
        except httpx.TimeoutException as e:
            raise APITimeoutError(
                "Timeout while waiting for the Kubernetes API server"
            ) from e
        yield response

    async def version(self) -> dict:
        """Get the Kubernetes version information from the API.

        Returns:
            The Kubernetes version information.

        Raises:
            ServerError: If the API server does not respond with 200 OK.
            APITimeoutError: If the API server does not respond in time.
        """
        return await self.async_version()

    async def async_version(self) -> dict:
        async with self.call_api(
            method="GET", version="", base="/version", raise_for_status=False
        ) as response:
            if response.status_code != httpx.codes.OK:
                raise _unexpected_response(response)
            return response.json()

    async def check_version(
        self,
        version_info: dict | str | None = None,
        minimum: tuple[int, int, int] | None = None,
    ) -> VersionTriple:
        """Check that the Kubernetes API server is recent enough.

        Args:
            version_info: The version information returned by :meth:`version`, or a
                raw version string. Fetched from the API server if not provided.
            minimum: The oldest acceptable version. Defaults to :attr:`minimum_version`.

        Returns:
            The version of the Kubernetes API server.

        Raises:
            UnsupportedVersionError: If the server is older than the minimum version.
            VersionParseError: If the server version can't be parsed.

        Examples:
            >>> import kubegate
            >>> api = kubegate.api()
            >>> api.check_version()
            VersionTriple(major=1, minor=30, patch=2)
        """
        return await self.async_check_version(version_info, minimum=minimum)

    async def async_check_version(
        self,
        version_info: dict | str | None = None,
        minimum: tuple[int, int, int] | None = None,
    ) -> VersionTriple:
        if version_info is None:
            version_info = await self.async_version()
        if isinstance(version_info, dict):
            raw = version_info.get("gitVersion") or ""
        else:
            raw = version_info
        minimum = VersionTriple(*(minimum or self.minimum_version))
        actual = parse_version(raw)
        logger.debug(f"Kubernetes API server version {actual}, minimum {minimum}")
        if not is_compatible(minimum, actual):
            raise UnsupportedVersionError(minimum=minimum, actual=actual)
        return actual

    async def namespace_exists(self, namespace: str) -> bool:
        """Check whether a namespace exists.

        Args:
            namespace: The name of the namespace.

        Returns:
            True if the namespace exists, False if it does not.

        Raises:
            ServerError: If the API server responds with anything other than 200 or 404.
        """
        return await self.async_namespace_exists(namespace)

    async def async_namespace_exists(self, namespace: str) -> bool:
        async with self.call_api(
            method="GET", url=f"namespaces/{namespace}", raise_for_status=False
        ) as response:
            if response.status_code not in (httpx.codes.OK, httpx.codes.NOT_FOUND):
                raise _unexpected_response(response)
            logger.debug(f"Namespace {namespace} returned {response.status_code}")
            return response.status_code == httpx.codes.OK

    def url_for(self, namespace: str, extra_path: str) -> httpx.URL:
        """Build the URL of a resource path within a namespace.

        Args:
            namespace: The namespace the resource lives in.
            extra_path: The path below the namespace, starting with ``/``.

        Returns:
            The full URL on the Kubernetes API server.

        Raises:
            ValueError: If ``extra_path`` does not start with ``/``.

        Examples:
            >>> api.url_for("default", "/pods")
            URL('https://127.0.0.1:6443/api/v1/namespaces/default/pods')
        """
        if not extra_path.startswith("/"):
            raise ValueError(f"Path must start with a [/], was [{extra_path}]")
        server = self.auth.server.rstrip("/")
        return httpx.URL(f"{server}/api/v1/namespaces/{namespace}{extra_path}")

    @property
    def __version__(self) -> str:
        from . import __version__

        return f"kubegate/{__version__}"

    @property
    def namespace(self) -> str:
        """Get the default namespace."""
        return self.auth.namespace

    @namespace.setter
    def namespace(self, value):
        self.auth.namespace = value


def _unexpected_response(response: httpx.Response) -> ServerError:
    return ServerError(
        f"Unexpected Kubernetes API response: {response.status_code} {response.reason_phrase}",
        status=str(response.status_code),
        response=response,
    )


def _thread_loop_id() -> str:
    thread_id = threading.get_ident()
    try:
        loop_id = id(asyncio.get_running_loop())
    except RuntimeError:
        loop_id = 0
    return f"{thread_id}.{loop_id}"


def hash_kwargs(kwargs: dict):
    key_kwargs = copy.copy(kwargs)
    for key in key_kwargs:
        if isinstance(key_kwargs[key], dict):
            key_kwargs[key] = json.dumps(key_kwargs[key])
    return frozenset(key_kwargs.items())
