# SPDX-FileCopyrightText: Copyright (c) 2023-2025, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
import httpx
import pytest


class FakeKubernetes:
    """Serve the endpoints kubegate uses through an httpx mock transport.

    Attributes:
        git_version: The version reported by ``/version``
        namespaces: The namespaces that exist
        status_overrides: Paths that respond with a fixed status code
        timeouts: Paths that time out
        requests: Every request received, in order
    """

    def __init__(self, git_version: str = "v1.30.2") -> None:
        self.git_version = git_version
        self.namespaces = {"default", "kube-system"}
        self.status_overrides: dict[str, int] = {}
        self.timeouts: set[str] = set()
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self.handler)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self.timeouts:
            raise httpx.ReadTimeout("Timed out", request=request)
        if path in self.status_overrides:
            code = self.status_overrides[path]
            return httpx.Response(code, json=self.status(code, "Overridden"))
        if path == "/version":
            major, minor, *_ = self.git_version.lstrip("v").split(".") + ["", ""]
            return httpx.Response(
                200,
                json={
                    "major": major,
                    "minor": minor,
                    "gitVersion": self.git_version,
                    "platform": "linux/amd64",
                },
            )
        if path.startswith("/api/v1/namespaces/"):
            name = path.split("/")[4]
            if name in self.namespaces:
                return httpx.Response(
                    200,
                    json={"kind": "Namespace", "metadata": {"name": name}},
                )
            return httpx.Response(
                404, json=self.status(404, f'namespaces "{name}" not found')
            )
        return httpx.Response(
            404, json=self.status(404, "the server could not find the requested resource")
        )

    @staticmethod
    def status(code: int, message: str) -> dict:
        return {
            "kind": "Status",
            "apiVersion": "v1",
            "status": "Failure",
            "message": message,
            "code": code,
        }


@pytest.fixture
def k8s_server() -> FakeKubernetes:
    return FakeKubernetes()
