# SPDX-FileCopyrightText: Copyright (c) 2023-2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
import inspect
import sys

import pytest

from kubegate._async_utils import NamedTemporaryFile, check_output, run_sync, sync


async def test_check_output():
    output = await check_output(sys.executable, "-c", "print('hello')")
    assert output.strip() == "hello"


async def test_check_output_failure():
    with pytest.raises(RuntimeError, match="non-zero code 3"):
        await check_output(sys.executable, "-c", "import sys; sys.exit(3)")


async def test_named_temporary_file():
    async with NamedTemporaryFile() as fh:
        await fh.write_text("data")
        assert await fh.read_text() == "data"
    assert not await fh.exists()

    async with NamedTemporaryFile(delete=False) as fh:
        pass
    assert await fh.exists()
    await fh.unlink()


def test_run_sync():
    async def add(a, b):
        return a + b

    assert run_sync(add)(1, b=2) == 3

    with pytest.raises(TypeError, match="Expected coroutine function"):
        run_sync(lambda: None)


def test_sync_class():
    class Foo:
        async def async_bar(self):
            return 42

        async def bar(self):
            return await self.async_bar()

        async def _baz(self):
            return 0

    SyncFoo = sync(Foo)  # noqa: N806
    foo = SyncFoo()
    assert SyncFoo._asyncio is False
    assert foo.bar() == 42
    coro = foo._baz()
    assert inspect.iscoroutine(coro)
    coro.close()
