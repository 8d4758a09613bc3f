# SPDX-FileCopyrightText: Copyright (c) 2023-2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
import base64
import json
import logging
import os
import ssl
from typing import Optional, Union

import anyio

from ._async_utils import NamedTemporaryFile, check_output
from ._config import KubeConfigSet
from ._types import KubeConfigSource, PathType

logger = logging.getLogger(__name__)

DEFAULT_SERVICEACCOUNT = "/var/run/secrets/kubernetes.io/serviceaccount"


class KubeAuth:
    """Load Kubernetes credentials from a url, a kubeconfig or a service account."""

    def __init__(
        self,
        kubeconfig: Optional[KubeConfigSource] = None,
        url: Optional[str] = None,
        serviceaccount: Optional[str] = None,
        namespace: Optional[str] = None,
        context: Optional[str] = None,
    ) -> None:
        self.server: str = ""
        self.client_cert_file: Optional[PathType] = None
        self.client_key_file: Optional[PathType] = None
        self.server_ca_file: Optional[PathType] = None
        self.token: Optional[str] = None
        self.active_context: str = ""
        self.kubeconfig: Optional[KubeConfigSet] = None
        self.tls_server_name: Optional[str] = None
        self._namespace: Optional[str] = namespace
        self._url: str = url or ""
        self._insecure_skip_tls_verify: bool = False
        self._use_context: Optional[str] = context
        self._context: dict = {}
        self._cluster: dict = {}
        self._user: dict = {}
        self._serviceaccount: str = (
            serviceaccount if serviceaccount is not None else DEFAULT_SERVICEACCOUNT
        )
        self._kubeconfig_path_or_dict: KubeConfigSource = (
            kubeconfig
            if kubeconfig
            else os.environ.get("KUBECONFIG", "~/.kube/config")
        )
        self.__auth_lock: anyio.Lock = anyio.Lock()

    def __await__(self):
        async def f():
            await self.reauthenticate()
            return self

        return f().__await__()

    async def reauthenticate(self) -> None:
        """Load credentials, in order of preference url, kubeconfig then service account."""
        async with self.__auth_lock:
            if self._url:
                self.server = self._url
            else:
                await self._load_kubeconfig()
                if self._serviceaccount and not self.server:
                    await self._load_service_account()
            if not self.server:
                raise ValueError("Unable to find valid credentials")
            logger.debug(f"Authenticated against {self.server}")

    async def ssl_context(self) -> Union[ssl.SSLContext, bool]:
        """Build the TLS verification setting for the HTTP client."""
        if self._insecure_skip_tls_verify:
            return False
        async with self.__auth_lock:
            if (
                not self.client_key_file
                and not self.client_cert_file
                and not self.server_ca_file
            ):
                # Without any certificates fall back to the system trust store
                return True
            sslcontext = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
            if self.client_key_file and self.client_cert_file:
                sslcontext.load_cert_chain(
                    certfile=self.client_cert_file,
                    keyfile=self.client_key_file,
                    password=None,
                )
            if self.server_ca_file:
                sslcontext.load_verify_locations(cafile=self.server_ca_file)
            return sslcontext

    @property
    def namespace(self) -> str:
        return self._namespace if self._namespace else "default"

    @namespace.setter
    def namespace(self, value: str):
        self._namespace = value

    async def _resolve_path(self, path: str) -> PathType:
        """Resolve a path from the kubeconfig relative to the kubeconfig file."""
        if await anyio.Path(path).exists() or self.kubeconfig is None:
            return path
        kubeconfig_path = self.kubeconfig.get_path(self.active_context)
        if kubeconfig_path is None:
            return path
        return str(anyio.Path(kubeconfig_path).parent / path)

    async def _write_data(self, data: str) -> str:
        """Write inline certificate data from the kubeconfig to a temporary file."""
        async with NamedTemporaryFile(delete=False) as fh:
            if "-----" in data:
                await fh.write_bytes(data.encode())
            else:
                await fh.write_bytes(base64.b64decode(data))
            return str(fh)

    async def _load_kubeconfig(self) -> None:
        """Load credentials from a kubeconfig."""
        source = self._kubeconfig_path_or_dict
        try:
            if isinstance(source, dict):
                self.kubeconfig = await KubeConfigSet(source)
            elif os.name != "nt":
                self.kubeconfig = await KubeConfigSet(*str(source).split(":"))
            else:
                # Windows paths contain colons so only one config is supported
                self.kubeconfig = await KubeConfigSet(source)
        except ValueError:
            return

        if self._use_context:
            try:
                self._context = self.kubeconfig.get_context(self._use_context)
            except ValueError as e:
                raise ValueError(f"No such context {self._use_context}") from e
            self.active_context = self._use_context
        elif self.kubeconfig.current_context:
            self._context = self.kubeconfig.get_context(self.kubeconfig.current_context)
            self.active_context = self.kubeconfig.current_context
        elif self.kubeconfig.contexts:
            self._context = self.kubeconfig.contexts[0]["context"]
            self.active_context = self.kubeconfig.contexts[0]["name"]
        else:
            return

        if self._namespace is None:
            self._namespace = self._context.get("namespace")

        # A context without a cluster defers to the service account
        if not self._context.get("cluster"):
            return

        self._cluster = self.kubeconfig.get_cluster(self._context["cluster"])
        self._user = dict(self.kubeconfig.get_user(self._context["user"]))
        self.server = self._cluster["server"]

        if self._cluster.get("insecure-skip-tls-verify"):
            self._insecure_skip_tls_verify = True
        if "tls-server-name" in self._cluster:
            self.tls_server_name = self._cluster["tls-server-name"]

        if "exec" in self._user:
            await self._load_exec_credentials()

        if "client-key" in self._user:
            self.client_key_file = await self._resolve_path(self._user["client-key"])
        if "client-key-data" in self._user:
            self.client_key_file = await self._write_data(self._user["client-key-data"])
        if "client-certificate" in self._user:
            self.client_cert_file = await self._resolve_path(
                self._user["client-certificate"]
            )
        if "client-certificate-data" in self._user:
            self.client_cert_file = await self._write_data(
                self._user["client-certificate-data"]
            )
        if "certificate-authority" in self._cluster:
            self.server_ca_file = await self._resolve_path(
                self._cluster["certificate-authority"]
            )
        if "certificate-authority-data" in self._cluster:
            self.server_ca_file = await self._write_data(
                self._cluster["certificate-authority-data"]
            )
        if "token" in self._user:
            self.token = self._user["token"]
        if "username" in self._user or "password" in self._user:
            raise ValueError(
                "username/password authentication was removed in Kubernetes 1.19 "
                "and is not supported by kubegate"
            )
        if "auth-provider" in self._user:
            provider = self._user["auth-provider"]["name"]
            if provider != "oidc":
                raise ValueError(
                    f"auth-provider {provider} was deprecated in Kubernetes 1.21 "
                    "and is not supported by kubegate"
                )
            self.token = self._user["auth-provider"]["config"]["id-token"]

    async def _load_exec_credentials(self) -> None:
        """Run an exec credential plugin and merge its output into the user."""
        exec_config = self._user["exec"]
        if exec_config["apiVersion"] == "client.authentication.k8s.io/v1alpha1":
            raise ValueError(
                "client.authentication.k8s.io/v1alpha1 is not supported for exec auth"
            )
        command = exec_config["command"]
        args = exec_config.get("args") or []
        env = os.environ.copy()
        env.update(**{e["name"]: e["value"] for e in exec_config.get("env") or []})
        data = json.loads(await check_output(command, *args, env=env))["status"]
        if "token" in data:
            self._user["token"] = data["token"]
        elif "clientCertificateData" in data and "clientKeyData" in data:
            self._user["client-certificate-data"] = data["clientCertificateData"]
            self._user["client-key-data"] = data["clientKeyData"]
        else:
            raise KeyError(f"Did not find credentials in {command} output.")

    async def _load_service_account(self) -> None:
        """Load credentials from an in-cluster service account."""
        self._serviceaccount = os.path.expanduser(self._serviceaccount)
        if not os.path.isdir(self._serviceaccount):
            return
        host = os.environ["KUBERNETES_SERVICE_HOST"]
        port = os.environ["KUBERNETES_SERVICE_PORT"]
        self.server = f"https://{host}:{port}"
        async with await anyio.open_file(
            os.path.join(self._serviceaccount, "token")
        ) as f:
            self.token = (await f.read()).strip()
        self.server_ca_file = os.path.join(self._serviceaccount, "ca.crt")
        namespace_file = anyio.Path(self._serviceaccount) / "namespace"
        if self._namespace is None and await namespace_file.exists():
            self._namespace = (await namespace_file.read_text()).strip()
