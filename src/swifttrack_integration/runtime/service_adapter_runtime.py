# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Adapter runtime: wires one broker client to one or more bridges.

Startup order:
    1. Connect every bridge (a failed connect schedules its own reconnect)
    2. Connect the broker (asserts topology)
    3. Bind every queue
    4. Subscribe one handler per queue

Shutdown reverses it: unsubscribe, close the broker (cancels its
reconnect timer), close the bridges.

Usage:
    ```python
    runtime = build_warehouse_runtime(ModelIntegrationConfig.default())
    await runtime.run_until_stopped()  # returns on SIGINT/SIGTERM
    ```
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from collections.abc import Sequence
from contextlib import suppress
from typing import Protocol

from swifttrack_integration.correlation import ProtocolCorrelationStore
from swifttrack_integration.enums import EnumConnectionState, EnumInfraTransportType
from swifttrack_integration.errors import (
    ModelInfraErrorContext,
    ProtocolConfigurationError,
)
from swifttrack_integration.event_bus.protocol_broker_client import (
    BrokerMessageHandler,
    ProtocolBrokerClient,
    Unsubscribe,
)
from swifttrack_integration.runtime.model_adapter_binding import ModelAdapterBinding

logger = logging.getLogger(__name__)


class ProtocolBridge(Protocol):
    """What the runtime needs from a bridge."""

    @property
    def connection_state(self) -> EnumConnectionState: ...

    async def connect(self) -> bool: ...

    async def close(self) -> None: ...

    async def health_check(self) -> dict[str, object]: ...


def _handlers_by_queue(
    bindings: Sequence[ModelAdapterBinding],
) -> dict[str, BrokerMessageHandler]:
    handlers: dict[str, BrokerMessageHandler] = {}
    for binding in bindings:
        existing = handlers.setdefault(binding.queue, binding.handler)
        if existing != binding.handler:
            raise ProtocolConfigurationError(
                f"Queue {binding.queue} is bound to more than one handler",
                context=ModelInfraErrorContext.with_correlation(
                    transport_type=EnumInfraTransportType.RUNTIME,
                    operation="build_runtime",
                    target_name=binding.queue,
                ),
            )
    return handlers


class AdapterRuntime:
    """Lifecycle owner for an adapter process.

    Attributes:
        name: Adapter name used in status lines
        broker: Broker client
        bridges: Bridges started and stopped with the runtime
        bindings: Queue bindings and their handlers
    """

    def __init__(
        self,
        name: str,
        broker: ProtocolBrokerClient,
        bridges: Sequence[ProtocolBridge],
        bindings: Sequence[ModelAdapterBinding],
        *,
        correlation_store: ProtocolCorrelationStore | None = None,
        status_interval: float = 15.0,
    ) -> None:
        self.name = name
        self.broker = broker
        self.bridges = list(bridges)
        self.bindings = list(bindings)
        self._handlers = _handlers_by_queue(self.bindings)
        self._store = correlation_store
        self._status_interval = status_interval
        self._unsubscribes: list[Unsubscribe] = []
        self._started = False

    @property
    def is_running(self) -> bool:
        return self._started

    async def start(self) -> None:
        """Connect everything and begin consuming.

        Transport failures do not raise; the affected component keeps
        reconnecting in the background.

        Raises:
            ProtocolConfigurationError: Invalid bindings or configuration.
        """
        if self._started:
            return
        for bridge in self.bridges:
            await bridge.connect()
        await self.broker.connect()
        for binding in self.bindings:
            await self.broker.bind_queue(
                binding.queue, binding.topic, binding.routing_key
            )
        for queue, handler in self._handlers.items():
            self._unsubscribes.append(await self.broker.subscribe(queue, handler))
        self._started = True
        logger.info(
            f"Adapter {self.name} started",
            extra={"adapter": self.name, "queues": sorted(self._handlers)},
        )

    async def stop(self) -> None:
        """Unsubscribe, then close the broker and every bridge."""
        unsubscribes, self._unsubscribes = self._unsubscribes, []
        for unsubscribe in reversed(unsubscribes):
            await unsubscribe()
        await self.broker.close()
        for bridge in self.bridges:
            await bridge.close()
        self._started = False
        logger.info(f"Adapter {self.name} stopped", extra={"adapter": self.name})

    async def status(self) -> dict[str, object]:
        """Snapshot used for the periodic status line."""
        return {
            "adapter": self.name,
            "broker": self.broker.connection_state.value,
            "bridges": {
                type(bridge).__name__: bridge.connection_state.value
                for bridge in self.bridges
            },
            "tracked_correlations": (
                await self._store.count() if self._store is not None else 0
            ),
        }

    async def _log_status(self) -> None:
        status = await self.status()
        bridges = " ".join(
            f"{type(bridge).__name__}={bridge.connection_state.value}"
            for bridge in self.bridges
        )
        logger.info(
            f"[STATUS] adapter={self.name} {bridges} broker={status['broker']} "
            f"trackedCorrelations={status['tracked_correlations']}",
            extra={"adapter": self.name},
        )

    async def _status_loop(self) -> None:
        while True:
            await asyncio.sleep(self._status_interval)
            await self._log_status()

    async def run_until_stopped(self, stop_event: asyncio.Event | None = None) -> None:
        """Start, log status periodically, and stop on SIGINT/SIGTERM or ``stop_event``."""
        stop_event = stop_event or asyncio.Event()
        loop = asyncio.get_running_loop()

        def handle_shutdown(sig: signal.Signals) -> None:
            logger.info(f"Received {sig.name}, shutting down {self.name}")
            stop_event.set()

        installed: list[signal.Signals] = []
        if sys.platform != "win32":
            for sig in (signal.SIGINT, signal.SIGTERM):
                with suppress(NotImplementedError, RuntimeError):
                    loop.add_signal_handler(sig, handle_shutdown, sig)
                    installed.append(sig)

        status_task: asyncio.Task[None] | None = None
        try:
            await self.start()
            status_task = loop.create_task(self._status_loop())
            await stop_event.wait()
        finally:
            if status_task is not None:
                status_task.cancel()
                with suppress(asyncio.CancelledError):
                    await status_task
            for sig in installed:
                loop.remove_signal_handler(sig)
            await self.stop()


__all__: list[str] = ["AdapterRuntime", "ProtocolBridge"]
