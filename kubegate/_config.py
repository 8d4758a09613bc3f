# SPDX-FileCopyrightText: Copyright (c) 2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
import pathlib
from typing import Dict, List, Optional

import anyio
import yaml

from ._data_utils import dedupe_named
from ._types import KubeConfigSource, PathType


class _NamedLookupMixin:
    """Lookups shared by a single kubeconfig and a merged set of kubeconfigs."""

    contexts: List[Dict]
    clusters: List[Dict]
    users: List[Dict]
    current_context: str

    @property
    def current_namespace(self) -> str:
        """Return the namespace of the current context."""
        return self.get_context(self.current_context).get("namespace", "default")

    def get_context(self, context_name: str) -> Dict:
        """Get a context by name."""
        for context in self.contexts:
            if context["name"] == context_name:
                return context["context"]
        raise ValueError(f"Context {context_name} not found")

    def get_cluster(self, cluster_name: str) -> Dict:
        """Get a cluster by name."""
        for cluster in self.clusters:
            if cluster["name"] == cluster_name:
                return cluster["cluster"]
        raise ValueError(f"Cluster {cluster_name} not found")

    def get_user(self, user_name: str) -> Dict:
        """Get a user by name."""
        for user in self.users:
            if user["name"] == user_name:
                return user["user"]
        raise ValueError(f"User {user_name} not found")


class KubeConfigSet(_NamedLookupMixin):
    """Several kubeconfig files merged the way ``kubectl`` merges ``$KUBECONFIG``."""

    def __init__(self, *paths_or_dicts: KubeConfigSource):
        self._configs = []
        for path_or_dict in paths_or_dicts:
            try:
                self._configs.append(KubeConfig(path_or_dict))
            except ValueError:
                pass
        if not self._configs:
            raise ValueError("No valid kubeconfig provided")

    def __await__(self):
        async def f():
            for config in self._configs:
                await config
            return self

        return f().__await__()

    @property
    def path(self) -> Optional[PathType]:
        return self.get_path()

    def get_path(self, context: Optional[str] = None) -> Optional[PathType]:
        """Return the path of the config that defines a context.

        Args:
            context: The context to look for. Defaults to the current context.
        """
        if not context:
            context = self.current_context
        if context:
            for config in self._configs:
                if context in [c["name"] for c in config.contexts]:
                    return config.path
        return self._configs[0].path

    @property
    def current_context(self) -> str:
        """Return the current context from the first kubeconfig.

        The current context of the other files is ignored.
        """
        return self._configs[0].current_context

    @property
    def clusters(self) -> List[Dict]:
        clusters = []
        for config in self._configs:
            clusters.extend(config.clusters)
        return dedupe_named(clusters, "cluster")

    @property
    def users(self) -> List[Dict]:
        users = []
        for config in self._configs:
            users.extend(config.users)
        return dedupe_named(users, "user")

    @property
    def contexts(self) -> List[Dict]:
        contexts = []
        for config in self._configs:
            contexts.extend(config.contexts)
        return dedupe_named(contexts, "context")


class KubeConfig(_NamedLookupMixin):
    """A single kubeconfig, loaded from a file or given as a dict."""

    def __init__(self, path_or_config: KubeConfigSource):
        self.path: Optional[PathType] = None
        self._raw: dict = {}

        if not path_or_config:
            raise ValueError("KubeConfig path_or_config is None or empty string.")
        if isinstance(path_or_config, (str, pathlib.Path)):
            self.path = pathlib.Path(path_or_config).expanduser()
            if not self.path.exists():
                raise ValueError(f"File {self.path} does not exist")
            if self.path.is_dir():
                raise IsADirectoryError(
                    f'Error loading config file "{self.path}": is a directory.'
                )
        elif isinstance(path_or_config, dict):
            self._raw = path_or_config
        else:
            raise TypeError("KubeConfig path_or_config must be a string, path or dict.")

    def __await__(self):
        async def f():
            if not self._raw:
                async with await anyio.open_file(self.path) as fh:
                    self._raw = yaml.safe_load(await fh.read()) or {}
            return self

        return f().__await__()

    @property
    def raw(self) -> Dict:
        return self._raw

    @property
    def current_context(self) -> str:
        return self._raw.get("current-context", "")

    @property
    def clusters(self) -> List[Dict]:
        return self._raw.get("clusters") or []

    @property
    def users(self) -> List[Dict]:
        return self._raw.get("users") or []

    @property
    def contexts(self) -> List[Dict]:
        return self._raw.get("contexts") or []
