# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Loopback fake warehouse server for line-protocol tests."""

from __future__ import annotations

import asyncio
import json
from typing import Any


class FakeWarehouse:
    """Line-protocol server that records inbound lines and can push events."""

    def __init__(self) -> None:
        self.received: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self.connections = 0
        self._server: asyncio.Server | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._connected = asyncio.Event()
        self.auto_reply: dict[str, Any] | None = None

    @property
    def port(self) -> int:
        assert self._server is not None
        return int(self._server.sockets[0].getsockname()[1])

    async def start(self, port: int = 0) -> None:
        self._server = await asyncio.start_server(self._serve, "127.0.0.1", port)

    async def stop(self) -> None:
        await self.disconnect_client()
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()

    async def _serve(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        self.connections += 1
        self._writer = writer
        self._connected.set()
        try:
            while line := await reader.readline():
                message = json.loads(line)
                await self.received.put(message)
                if message.get("type") == "command" and self.auto_reply is not None:
                    await self.send(
                        {
                            "type": "command_result",
                            "requestId": message["requestId"],
                            **self.auto_reply,
                        }
                    )
        except (ConnectionError, asyncio.CancelledError):
            pass
        finally:
            writer.close()

    async def wait_connected(self, count: int = 1) -> None:
        async with asyncio.timeout(2):
            while self.connections < count:
                await asyncio.sleep(0.005)

    async def next_line(self) -> dict[str, Any]:
        async with asyncio.timeout(2):
            return await self.received.get()

    async def send(self, obj: dict[str, Any]) -> None:
        await self.send_raw((json.dumps(obj) + "\n").encode("utf-8"))

    async def send_raw(self, data: bytes) -> None:
        assert self._writer is not None
        self._writer.write(data)
        await self._writer.drain()

    async def disconnect_client(self) -> None:
        writer, self._writer = self._writer, None
        if writer is not None:
            writer.close()
            try:
                await writer.wait_closed()
            except ConnectionError:
                pass


async def wait_until(predicate: Any, timeout: float = 2.0) -> None:
    """Poll ``predicate`` until it is true."""
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.005)


__all__: list[str] = ["FakeWarehouse", "wait_until"]
