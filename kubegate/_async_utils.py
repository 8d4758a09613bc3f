# SPDX-FileCopyrightText: Copyright (c) 2023-2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
#
# Helpers that let kubegate offer a blocking API on top of its async implementation.
#
# Blocking calls may themselves be made from inside a running event loop (IPython, Jupyter,
# async test suites), so coroutines are never run on the caller's loop. Instead a single
# daemon thread runs an anyio loop and every blocking call is dispatched to it through a
# blocking portal.
from __future__ import annotations

import inspect
import subprocess
import sys
import tempfile
from contextlib import asynccontextmanager
from functools import partial, wraps
from threading import Thread
from typing import (
    AsyncGenerator,
    Awaitable,
    Callable,
    TypeVar,
)

if sys.version_info >= (3, 10):
    from typing import ParamSpec
else:
    from typing_extensions import ParamSpec

import anyio
import anyio.from_thread
import anyio.to_thread

T = TypeVar("T")
C = TypeVar("C")
P = ParamSpec("P")


class Portal:
    """Singleton owning the thread that runs blocking calls.

    See https://anyio.readthedocs.io/en/stable/api.html#anyio.from_thread.start_blocking_portal
    """

    _instance: Portal
    _portal: anyio.from_thread.BlockingPortal
    thread: Thread

    def __new__(cls):
        if not hasattr(cls, "_instance"):
            cls._instance = super().__new__(cls)
            cls._instance.thread = Thread(
                target=anyio.run,
                args=[cls._instance._run],
                name="KubegateSyncRunnerThread",
            )
            cls._instance.thread.daemon = True
            cls._instance.thread.start()
        return cls._instance

    async def _run(self):
        async with anyio.from_thread.BlockingPortal() as portal:
            self._portal = portal
            await portal.sleep_until_stopped()

    def call(self, func: Callable[P, Awaitable[T]], *args, **kwargs) -> T:
        """Run a coroutine function on the portal loop and wait for its result."""
        # The loop is started lazily by the thread
        while not hasattr(self, "_portal"):
            pass
        return self._portal.call(func, *args, **kwargs)


def run_sync(coro: Callable[P, Awaitable[T]]) -> Callable[P, T]:
    """Wrap a coroutine function in a function that blocks until it completes.

    Args:
        coro: A coroutine function.

    Returns:
        A blocking function that runs the coroutine via the :class:`Portal`.

    Raises:
        TypeError: If ``coro`` is not a coroutine function.
    """
    if inspect.iscoroutinefunction(coro):

        @wraps(coro)
        def run_sync_inner(*args: P.args, **kwargs: P.kwargs) -> T:
            wrapped = partial(coro, *args, **kwargs)
            return Portal().call(wrapped)

        return run_sync_inner

    raise TypeError(f"Expected coroutine function, got {coro.__class__.__name__}")


def sync(source: C) -> C:
    """Replace the public coroutine methods of a class with blocking versions.

    Private methods and methods prefixed with ``async_`` are left alone so that
    coroutines can keep calling each other from inside the portal loop.

    Args:
        source: The class to convert.

    Returns:
        The same class, modified in place.
    """
    setattr(source, "_asyncio", False)  # noqa: B010
    for name in dir(source):
        method = getattr(source, name)
        if name.startswith("_") or name.startswith("async_"):
            continue
        if inspect.iscoroutinefunction(method):
            setattr(source, name, run_sync(method))
    return source


async def check_output(*args, **kwargs) -> str:
    """Run a command and return its stdout."""
    completed_process = await anyio.run_process(
        args,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        check=False,
        **kwargs,
    )
    if completed_process.returncode == 0:
        return completed_process.stdout.decode()
    raise RuntimeError(
        f"Process exited with non-zero code {completed_process.returncode}:\n"
        f"{completed_process.stderr.decode()}"
    )


@asynccontextmanager
async def NamedTemporaryFile(  # noqa: N802
    *args, delete: bool = True, **kwargs
) -> AsyncGenerator[anyio.Path, None]:
    """Create a temporary file, removing it on exit unless ``delete`` is False."""
    kwargs.update(delete=False)

    def f():
        return tempfile.NamedTemporaryFile(*args, **kwargs)

    tmp = await anyio.to_thread.run_sync(f)
    tmp.close()
    fh = anyio.Path(tmp.name)
    yield fh
    if delete:
        await fh.unlink()
