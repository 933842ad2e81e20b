# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Reconnecting connection state machine shared by the broker client and bridges.

States:
    DISCONNECTED -> CONNECTING -> CONNECTED
    CONNECTED -> DISCONNECTED on any transport error or close
    DISCONNECTED -> CONNECTING again after a fixed reconnect interval

There is exactly one scheduling point, ``_schedule_reconnect()``. It is a
no-op while a reconnect is already pending, so concurrent transport errors
(a failed write racing a reader EOF, for example) never produce duplicate
reconnect attempts.

The delay is constant. Targets outside a co-located test environment
should move to capped exponential backoff with jitter.

Usage:
    ```python
    class WarehouseLineBridge(MixinReconnectingConnection):
        def __init__(self, config):
            self._init_reconnect(
                service_name=f"wms:{config.host}:{config.port}",
                reconnect_interval=config.reconnect_interval_ms / 1000,
                transport_type=EnumInfraTransportType.TCP,
            )

        async def _open_transport(self) -> None:
            self._reader, self._writer = await asyncio.open_connection(...)

        async def _read_loop(self) -> None:
            ...
            self._handle_connection_lost("eof")
    ```
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress

from swifttrack_integration.enums import EnumConnectionState, EnumInfraTransportType
from swifttrack_integration.errors import ProtocolConfigurationError
from swifttrack_integration.utils import sanitize_error_message

logger = logging.getLogger(__name__)


class MixinReconnectingConnection:
    """Explicit disconnected/connecting/connected state machine.

    Subclasses implement ``_open_transport()`` (raise on failure) and
    ``_teardown_transport()``, and call
    ``_handle_connection_lost()`` whenever the live transport fails.
    ``_shutdown_reconnect()`` must be awaited from ``close()``.
    """

    def _init_reconnect(
        self,
        *,
        service_name: str,
        reconnect_interval: float,
        transport_type: EnumInfraTransportType,
    ) -> None:
        if reconnect_interval < 0:
            raise ValueError(
                f"reconnect_interval must be >= 0, got {reconnect_interval}"
            )
        self._connection_state = EnumConnectionState.DISCONNECTED
        self._reconnect_interval = reconnect_interval
        self._reconnect_service_name = service_name
        self._reconnect_transport_type = transport_type
        self._reconnect_task: asyncio.Task[None] | None = None
        self._connect_lock = asyncio.Lock()
        self._closing = False
        self.reconnect_attempts = 0

    @property
    def connection_state(self) -> EnumConnectionState:
        return self._connection_state

    @property
    def is_connected(self) -> bool:
        return self._connection_state is EnumConnectionState.CONNECTED

    @property
    def reconnect_pending(self) -> bool:
        return self._reconnect_task is not None and not self._reconnect_task.done()

    async def _open_transport(self) -> None:
        raise NotImplementedError

    async def _teardown_transport(self) -> None:
        """Release whatever ``_open_transport`` acquired. Must be idempotent."""

    async def connect(self) -> bool:
        """Attempt a connection; idempotent while connected.

        Returns:
            True when connected. False when the attempt failed, in which
            case a reconnect has been scheduled.

        Raises:
            ProtocolConfigurationError: The transport cannot be opened with
                the current configuration. No reconnect is scheduled.
        """
        self._closing = False
        async with self._connect_lock:
            if self._connection_state is EnumConnectionState.CONNECTED:
                return True

            self._set_connection_state(EnumConnectionState.CONNECTING)
            try:
                await self._open_transport()
            except asyncio.CancelledError:
                self._set_connection_state(EnumConnectionState.DISCONNECTED)
                raise
            except ProtocolConfigurationError:
                self._set_connection_state(EnumConnectionState.DISCONNECTED)
                raise
            except Exception as e:
                self._set_connection_state(EnumConnectionState.DISCONNECTED)
                logger.warning(
                    f"Connection to {self._reconnect_service_name} failed, "
                    f"retrying in {self._reconnect_interval}s",
                    extra={
                        "service": self._reconnect_service_name,
                        "transport_type": self._reconnect_transport_type.value,
                        "error": sanitize_error_message(e),
                        "attempt": self.reconnect_attempts,
                    },
                )
                self._schedule_reconnect()
                return False

            if self._closing:
                # close() arrived while the transport was opening.
                await self._teardown_transport()
                self._set_connection_state(EnumConnectionState.DISCONNECTED)
                return False

            self._set_connection_state(EnumConnectionState.CONNECTED)
            self.reconnect_attempts = 0
            return True

    def _handle_connection_lost(self, reason: str | BaseException | None = None) -> None:
        """Move to DISCONNECTED and schedule a reconnect."""
        was = self._connection_state
        self._set_connection_state(EnumConnectionState.DISCONNECTED)
        if self._closing:
            return
        detail = (
            sanitize_error_message(reason)
            if isinstance(reason, BaseException)
            else (reason or "closed")
        )
        logger.warning(
            f"Connection to {self._reconnect_service_name} lost: {detail}",
            extra={
                "service": self._reconnect_service_name,
                "transport_type": self._reconnect_transport_type.value,
                "previous_state": was.value,
            },
        )
        self._schedule_reconnect()

    def _schedule_reconnect(self) -> None:
        """Single scheduling point for reconnect attempts."""
        if self._closing:
            return
        if self.reconnect_pending:
            logger.debug(
                "Reconnect already pending",
                extra={"service": self._reconnect_service_name},
            )
            return
        self._reconnect_task = asyncio.get_running_loop().create_task(
            self._reconnect_after_delay()
        )

    async def _reconnect_after_delay(self) -> None:
        await asyncio.sleep(self._reconnect_interval)
        # Cleared before connect() so a failed attempt can schedule the next one.
        self._reconnect_task = None
        if self._closing:
            return
        self.reconnect_attempts += 1
        logger.info(
            f"Reconnecting to {self._reconnect_service_name}",
            extra={
                "service": self._reconnect_service_name,
                "attempt": self.reconnect_attempts,
            },
        )
        try:
            await self.connect()
        except ProtocolConfigurationError as e:
            logger.error(
                f"Reconnect to {self._reconnect_service_name} abandoned: {e}",
                extra={"service": self._reconnect_service_name, **e.to_log_extra()},
            )

    async def _shutdown_reconnect(self) -> None:
        """Stop reconnecting and cancel a pending reconnect timer.

        Waits for an in-flight connect to finish; that connect sees the
        closing flag and tears its transport down.
        """
        self._closing = True
        task, self._reconnect_task = self._reconnect_task, None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        async with self._connect_lock:
            pass
        self._set_connection_state(EnumConnectionState.DISCONNECTED)

    def _set_connection_state(self, state: EnumConnectionState) -> None:
        if state is self._connection_state:
            return
        logger.debug(
            f"{self._reconnect_service_name}: {self._connection_state.value} -> {state.value}",
            extra={"service": self._reconnect_service_name},
        )
        self._connection_state = state


__all__ = ["MixinReconnectingConnection"]
