# SPDX-FileCopyrightText: Copyright (c) 2023-2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
import base64

import pytest
import yaml

import kubegate
from kubegate._api import Api
from kubegate._testutils import set_env

SERVER = "https://127.0.0.1:6443"
TOKEN = "kubegate-test-token"
CA_PEM = "-----BEGIN CERTIFICATE-----\nMIIBkubegate\n-----END CERTIFICATE-----\n"


@pytest.fixture
def kubeconfig_dict() -> dict:
    return {
        "apiVersion": "v1",
        "kind": "Config",
        "preferences": {},
        "current-context": "kind-kubegate",
        "clusters": [
            {"name": "kind-kubegate", "cluster": {"server": SERVER}},
            {
                "name": "staging",
                "cluster": {
                    "server": "https://staging.example.com:443",
                    "certificate-authority-data": base64.b64encode(
                        CA_PEM.encode()
                    ).decode(),
                    "tls-server-name": "kubernetes.staging",
                },
            },
        ],
        "users": [
            {"name": "kind-kubegate", "user": {"token": TOKEN}},
            {"name": "staging-admin", "user": {"token": "staging-token"}},
        ],
        "contexts": [
            {
                "name": "kind-kubegate",
                "context": {
                    "cluster": "kind-kubegate",
                    "user": "kind-kubegate",
                    "namespace": "kubegate-tests",
                },
            },
            {
                "name": "staging",
                "context": {"cluster": "staging", "user": "staging-admin"},
            },
        ],
    }


@pytest.fixture
def kubeconfig(tmp_path, kubeconfig_dict) -> str:
    path = tmp_path / "kubeconfig"
    path.write_text(yaml.safe_dump(kubeconfig_dict))
    return str(path)


@pytest.fixture(autouse=True)
def default_kubeconfig(tmp_path):
    """Point the default kubeconfig somewhere empty so tests never touch a real cluster."""
    with set_env(KUBECONFIG=str(tmp_path / "missing-kubeconfig")):
        yield


@pytest.fixture
def serviceaccount(tmp_path):
    path = tmp_path / "serviceaccount"
    path.mkdir()
    (path / "token").write_text(TOKEN + "\n")
    (path / "ca.crt").write_text(CA_PEM)
    (path / "namespace").write_text("kubegate-sa")
    with set_env(KUBERNETES_SERVICE_HOST="10.96.0.1", KUBERNETES_SERVICE_PORT="443"):
        yield str(path)


@pytest.fixture
async def api(k8s_server, kubeconfig):
    return await kubegate.asyncio.api(
        kubeconfig=kubeconfig, transport=k8s_server.transport
    )


@pytest.fixture(autouse=True)
def ensure_new_api_between_tests():
    yield
    Api._instances.clear()
