# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Line-protocol bridge to the warehouse management system.

Maintains one long-lived TCP connection carrying newline-delimited JSON.
Inbound ``order.created`` events become ``receive_package`` lines; lines
from the warehouse become ``wms.package.*`` domain events on the orders
topic, with order and package ids filled in from the correlation store.

Connection lifecycle:
    connect -> register_adapter handshake -> one reader task per connection
    EOF / reset / failed write -> DISCONNECTED -> reconnect after
    ``reconnect_interval_ms`` (single scheduling point in the mixin)

Request/response commands:
    ``send_command()`` writes ``{"type": "command", "requestId", ...}`` and
    waits for the matching ``command_result`` line. A command that gets no
    reply within ``request_timeout_ms`` fails with InfraTimeoutError; the
    connection is left alone.
"""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import suppress
from typing import Any
from uuid import UUID

from pydantic import ValidationError

from swifttrack_integration.correlation import (
    ProtocolCorrelationStore,
    enrich_identifiers,
)
from swifttrack_integration.enums import (
    EnumInfraTransportType,
    EnumMessageDisposition,
    EnumWarehouseCommand,
    EnumWarehouseEventType,
)
from swifttrack_integration.errors import (
    ExternalCommandError,
    InfraConnectionError,
    InfraTimeoutError,
    InfraUnavailableError,
    ModelInfraErrorContext,
    RuntimeHostError,
)
from swifttrack_integration.event_bus.models import ModelBrokerMessage
from swifttrack_integration.event_bus.protocol_broker_client import (
    ProtocolBrokerClient,
)
from swifttrack_integration.mixins import MixinReconnectingConnection
from swifttrack_integration.models.config import ModelWarehouseBridgeConfig
from swifttrack_integration.models.orders import ModelOrderCreatedEvent
from swifttrack_integration.models.warehouse import (
    ModelCallbackMeta,
    ModelPendingRequest,
    ModelReceivePackage,
    ModelRegisterAdapter,
    ModelWarehouseCommand,
    ModelWarehouseEvent,
    ModelWarehousePackageEvent,
)
from swifttrack_integration.utils import (
    normalize_routing_key_suffix,
    sanitize_error_message,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

_LINE_SEPARATOR = b"\n"


class WarehouseLineBridge(MixinReconnectingConnection):
    """Bridge between the broker and the warehouse TCP line protocol.

    Attributes:
        config: Bridge configuration
        lines_dropped: Count of inbound lines discarded as unparseable,
            non-object, over-long or untyped
    """

    def __init__(
        self,
        config: ModelWarehouseBridgeConfig,
        broker: ProtocolBrokerClient,
        correlation_store: ProtocolCorrelationStore,
    ) -> None:
        self.config = config
        self._broker = broker
        self._store = correlation_store
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._reader_task: asyncio.Task[None] | None = None
        self._pending: dict[str, ModelPendingRequest] = {}
        self.lines_dropped = 0
        self._init_reconnect(
            service_name=config.target_name,
            reconnect_interval=config.reconnect_interval_ms / 1000,
            transport_type=EnumInfraTransportType.TCP,
        )

    # =========================================================================
    # Connection lifecycle
    # =========================================================================

    async def _open_transport(self) -> None:
        await self._teardown_transport()
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(
                    self.config.host,
                    self.config.port,
                    limit=self.config.max_line_bytes,
                ),
                timeout=self.config.connect_timeout_ms / 1000,
            )
        except TimeoutError as e:
            raise InfraTimeoutError(
                f"Timed out connecting to {self.config.target_name}",
                context=self._context("connect"),
                timeout_seconds=self.config.connect_timeout_ms / 1000,
            ) from e
        except OSError as e:
            raise InfraConnectionError(
                f"Failed to connect to {self.config.target_name}",
                context=self._context("connect"),
            ) from e

        registration = ModelRegisterAdapter(
            adapter_id=self.config.adapter_id,
            capabilities=list(self.config.capabilities),
        )
        try:
            writer.write(self._encode(registration.to_wire()))
            await writer.drain()
        except OSError as e:
            writer.close()
            raise InfraConnectionError(
                f"Registration with {self.config.target_name} failed",
                context=self._context("register_adapter"),
            ) from e

        self._reader, self._writer = reader, writer
        # Started last: nothing may yield between here and CONNECTED.
        self._reader_task = asyncio.get_running_loop().create_task(
            self._read_loop(reader, writer)
        )
        logger.info(
            f"Connected to warehouse {self.config.target_name}",
            extra={
                "adapter_id": self.config.adapter_id,
                "target_name": self.config.target_name,
            },
        )

    async def close(self) -> None:
        """Stop reconnecting, close the socket and fail pending commands."""
        await self._shutdown_reconnect()
        await self._teardown_transport()
        for pending in list(self._pending.values()):
            if not pending.future.done():
                pending.future.set_exception(
                    InfraUnavailableError(
                        "Warehouse bridge closed",
                        context=self._context(pending.command.value),
                        request_id=pending.request_id,
                    )
                )
        self._pending.clear()
        logger.info(
            "WarehouseLineBridge closed",
            extra={"adapter_id": self.config.adapter_id},
        )

    async def _teardown_transport(self) -> None:
        task, self._reader_task = self._reader_task, None
        writer, self._writer = self._writer, None
        self._reader = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        if writer is not None:
            writer.close()
            with suppress(OSError):
                await writer.wait_closed()

    def _drop_transport(
        self, writer: asyncio.StreamWriter, reason: str | BaseException
    ) -> None:
        """Mark ``writer``'s connection lost unless it was already replaced."""
        if writer is not self._writer:
            return
        self._writer = None
        self._reader = None
        writer.close()
        self._handle_connection_lost(reason)

    async def _read_loop(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        reason: str | BaseException = "closed by peer"
        discarding = False
        try:
            while True:
                try:
                    raw = await reader.readuntil(_LINE_SEPARATOR)
                except asyncio.LimitOverrunError as e:
                    if not discarding:
                        self.lines_dropped += 1
                        logger.warning(
                            f"Discarding warehouse line longer than "
                            f"{self.config.max_line_bytes} bytes",
                            extra={"target_name": self.config.target_name},
                        )
                    discarding = True
                    await reader.readexactly(e.consumed)
                    continue
                except asyncio.IncompleteReadError:
                    break
                if discarding:
                    discarding = False
                    continue
                try:
                    await self._handle_line(raw)
                except Exception as e:
                    self.lines_dropped += 1
                    logger.exception(
                        "Failed to handle warehouse line",
                        extra={
                            "target_name": self.config.target_name,
                            "error": sanitize_error_message(e),
                        },
                    )
        except OSError as e:
            reason = e
        self._drop_transport(writer, reason)

    # =========================================================================
    # Outbound
    # =========================================================================

    @staticmethod
    def _encode(obj: dict[str, Any]) -> bytes:
        return (json.dumps(obj, separators=(",", ":")) + "\n").encode("utf-8")

    async def send_line(self, obj: dict[str, Any]) -> bool:
        """Write one JSON object as a line.

        Returns:
            False when not connected or the write failed; a failed write
            also moves the bridge to DISCONNECTED.
        """
        writer = self._writer
        if not self.is_connected or writer is None or writer.is_closing():
            logger.debug(
                "Warehouse not connected, cannot send line",
                extra={"target_name": self.config.target_name, "type": obj.get("type")},
            )
            return False
        try:
            writer.write(self._encode(obj))
            await writer.drain()
        except OSError as e:
            logger.warning(
                f"Write to {self.config.target_name} failed",
                extra={
                    "target_name": self.config.target_name,
                    "error": sanitize_error_message(e),
                },
            )
            self._drop_transport(writer, e)
            return False
        return True

    async def handle_order_created(
        self, message: ModelBrokerMessage
    ) -> EnumMessageDisposition:
        """Forward an ``order.created`` event as a ``receive_package`` line.

        Returns:
            ACK once written; REQUEUE while the warehouse is unreachable.

        Raises:
            MessageValidationError: The event carries no ``orderId``.
        """
        order = ModelOrderCreatedEvent.from_payload(
            message.payload,
            operation="handle_order_created",
            correlation_id=message.correlation_id,
        )
        callback_correlation = message.payload.get("correlationId") or str(
            message.correlation_id
        )
        command = ModelReceivePackage(
            order_id=order.order_id,
            client_order_ref=order.order_id,
            items=[item.model_dump(mode="json") for item in order.items],
            pickup=order.pickup,
            delivery=order.delivery,
            contact=order.contact,
            callback_meta=ModelCallbackMeta(correlation_id=str(callback_correlation)),
        )
        if not await self.send_line(command.to_wire(exclude_none=False)):
            logger.warning(
                f"Warehouse not connected, requeueing order {order.order_id}",
                extra={
                    "order_id": order.order_id,
                    "correlation_id": str(message.correlation_id),
                },
            )
            return EnumMessageDisposition.REQUEUE

        logger.info(
            f"Sent receive_package for order {order.order_id}",
            extra={
                "order_id": order.order_id,
                "correlation_id": str(message.correlation_id),
            },
        )
        return EnumMessageDisposition.ACK

    # =========================================================================
    # Inbound
    # =========================================================================

    def routing_key_for(self, event_type: str) -> str:
        """Routing key for a warehouse event type, mapped or derived."""
        kind = EnumWarehouseEventType.parse(event_type)
        if kind is not None:
            return kind.routing_key
        suffix = normalize_routing_key_suffix(event_type)
        return f"{self.config.unknown_event_prefix}.{suffix}"

    def _drop_line(self, reason: str, line: str) -> None:
        self.lines_dropped += 1
        logger.warning(
            f"Dropping warehouse line: {reason}",
            extra={"target_name": self.config.target_name, "line": line[:200]},
        )

    async def _handle_line(self, raw: bytes) -> None:
        text = raw.decode("utf-8", errors="replace").strip()
        if not text:
            return
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            self._drop_line("not valid JSON", text)
            return
        if not isinstance(data, dict):
            self._drop_line("not a JSON object", text)
            return
        try:
            event = ModelWarehouseEvent.model_validate(data)
        except ValidationError:
            self._drop_line("unexpected field types", text)
            return

        if event.is_command_result:
            self._resolve_pending(event)
            return
        if not event.type:
            self._drop_line("missing type", text)
            return

        try:
            await self._republish(event, data)
        except RuntimeHostError as e:
            self.lines_dropped += 1
            logger.warning(
                f"Could not republish warehouse event {event.type}: {e}",
                extra=e.to_log_extra(),
            )

    async def _republish(self, event: ModelWarehouseEvent, raw: dict[str, Any]) -> None:
        order_id, package_id = event.order_id, event.package_id
        if event.kind is EnumWarehouseEventType.ACK and order_id and package_id:
            await self._store.record_ack(order_id, package_id)
        order_id, package_id = await enrich_identifiers(self._store, order_id, package_id)

        routing_key = self.routing_key_for(event.type or "")
        payload = ModelWarehousePackageEvent(
            package_id=package_id,
            order_id=order_id,
            raw=raw,
            timestamp=utc_now_iso(),
        )
        published = await self._broker.publish(
            self.config.publish_topic,
            routing_key,
            payload.to_wire(exclude_none=False),
            persistent=False,
        )
        if published:
            logger.info(
                f"Published {routing_key}",
                extra={
                    "routing_key": routing_key,
                    "order_id": order_id,
                    "package_id": package_id,
                },
            )

    # =========================================================================
    # Request/response commands
    # =========================================================================

    def _resolve_pending(self, event: ModelWarehouseEvent) -> None:
        pending = self._pending.get(event.request_id or "")
        if pending is None:
            logger.warning(
                "command_result for unknown request",
                extra={"request_id": event.request_id},
            )
            return
        if pending.future.done():
            return
        status = (event.status or "").upper()
        if status == "OK":
            pending.future.set_result(event.data)
            return
        detail = (event.model_extra or {}).get("message") or status or "no status"
        pending.future.set_exception(
            ExternalCommandError(
                f"Warehouse rejected {pending.command.value}: {detail}",
                context=self._context(pending.command.value),
                request_id=pending.request_id,
                status=event.status,
            )
        )

    async def send_command(
        self,
        command: EnumWarehouseCommand,
        data: dict[str, Any] | None = None,
        *,
        timeout: float | None = None,
        correlation_id: UUID | None = None,
    ) -> Any:
        """Send a command and wait for its ``command_result``.

        Returns:
            The ``data`` field of an ``OK`` result.

        Raises:
            InfraUnavailableError: Not connected, or the write failed.
            InfraTimeoutError: No reply within the timeout.
            ExternalCommandError: The warehouse answered with a non-OK status.
        """
        context = self._context(command.value, correlation_id)
        if not self.is_connected:
            raise InfraUnavailableError(
                f"Warehouse {self.config.target_name} not connected", context=context
            )

        request = ModelWarehouseCommand(command=command, data=data or {})
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._pending[request.request_id] = ModelPendingRequest(
            request_id=request.request_id, command=command, future=future
        )
        timeout_seconds = (
            timeout if timeout is not None else self.config.request_timeout_ms / 1000
        )
        try:
            if not await self.send_line(request.to_wire()):
                raise InfraUnavailableError(
                    f"Warehouse {self.config.target_name} not connected",
                    context=context,
                    request_id=request.request_id,
                )
            try:
                return await asyncio.wait_for(future, timeout=timeout_seconds)
            except TimeoutError as e:
                raise InfraTimeoutError(
                    f"No reply to {command.value} within {timeout_seconds}s",
                    context=context,
                    request_id=request.request_id,
                    timeout_seconds=timeout_seconds,
                ) from e
        finally:
            self._pending.pop(request.request_id, None)

    @property
    def pending_requests(self) -> int:
        return len(self._pending)

    async def ping(self) -> Any:
        return await self.send_command(EnumWarehouseCommand.PING)

    async def check_inventory(self, items: list[dict[str, Any]]) -> Any:
        return await self.send_command(
            EnumWarehouseCommand.CHECK_INVENTORY, {"items": items}
        )

    async def reserve_stock(self, order_id: str, items: list[dict[str, Any]]) -> Any:
        return await self.send_command(
            EnumWarehouseCommand.RESERVE_STOCK, {"orderId": order_id, "items": items}
        )

    async def release_stock(self, reservation_id: str) -> Any:
        return await self.send_command(
            EnumWarehouseCommand.RELEASE_STOCK, {"reservationId": reservation_id}
        )

    async def create_shipment(
        self,
        order_id: str,
        items: list[dict[str, Any]],
        delivery_address: str,
        priority: str = "normal",
    ) -> Any:
        return await self.send_command(
            EnumWarehouseCommand.CREATE_SHIPMENT,
            {
                "orderId": order_id,
                "items": items,
                "deliveryAddress": delivery_address,
                "priority": priority,
            },
        )

    async def update_shipment_status(
        self,
        shipment_id: str,
        status: str,
        metadata: dict[str, Any] | None = None,
    ) -> Any:
        return await self.send_command(
            EnumWarehouseCommand.UPDATE_SHIPMENT,
            {"shipmentId": shipment_id, "status": status, "metadata": metadata or {}},
        )

    async def update_stock(self, updates: list[dict[str, Any]]) -> Any:
        return await self.send_command(
            EnumWarehouseCommand.UPDATE_STOCK, {"updates": updates}
        )

    # =========================================================================
    # Health
    # =========================================================================

    async def health_check(self) -> dict[str, object]:
        return {
            "healthy": self.is_connected,
            "state": self.connection_state.value,
            "target": self.config.target_name,
            "adapter_id": self.config.adapter_id,
            "pending_requests": len(self._pending),
            "lines_dropped": self.lines_dropped,
            "reconnect_pending": self.reconnect_pending,
        }

    def _context(
        self, operation: str, correlation_id: UUID | None = None
    ) -> ModelInfraErrorContext:
        return ModelInfraErrorContext.with_correlation(
            correlation_id=correlation_id,
            transport_type=EnumInfraTransportType.TCP,
            operation=operation,
            target_name=self.config.target_name,
        )


__all__: list[str] = ["WarehouseLineBridge"]
