# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""SOAP bridge to the billing (client management) system.

Per inbound ``order.created`` event, one ``CreateOrder`` SOAP call; on
success a ``billing.order.created`` event is published to the orders
topic. Per inbound ``user.created`` event, one ``CreateCustomer`` call and
a ``billing.customer.created`` event on the users topic.

Failure semantics:
    Transport errors, SOAP faults and malformed responses are logged and
    the triggering message is acknowledged. Nothing is published and the
    call is not retried. A ``Success=false`` response is logged as a
    warning, also without a published event.

Availability:
    There is no persistent connection. ``connection_state`` is derived
    from the circuit breaker, which only reports: consecutive failures
    mark billing unavailable in health output, but every order is still
    sent and the next successful call marks it available again.
"""

from __future__ import annotations

import logging
from uuid import UUID

import httpx

from swifttrack_integration.bridges.util_soap_envelope import (
    build_create_customer_envelope,
    build_create_order_envelope,
    parse_create_customer_response,
    parse_create_order_response,
)
from swifttrack_integration.correlation import ProtocolCorrelationStore
from swifttrack_integration.enums import (
    EnumConnectionState,
    EnumInfraTransportType,
    EnumMessageDisposition,
)
from swifttrack_integration.errors import (
    InfraConnectionError,
    InfraTimeoutError,
    ModelInfraErrorContext,
    RuntimeHostError,
)
from swifttrack_integration.event_bus import topic_constants as topics
from swifttrack_integration.event_bus.models import ModelBrokerMessage
from swifttrack_integration.event_bus.protocol_broker_client import (
    ProtocolBrokerClient,
)
from swifttrack_integration.mixins import MixinAsyncCircuitBreaker
from swifttrack_integration.models.billing import (
    ModelBillingCustomerCreated,
    ModelBillingOrderCreated,
    ModelCreateCustomerResponse,
    ModelCreateOrderResponse,
    ModelUserCreatedEvent,
)
from swifttrack_integration.models.config import ModelBillingBridgeConfig
from swifttrack_integration.models.orders import ModelOrderCreatedEvent

logger = logging.getLogger(__name__)

_SOAP_CONTENT_TYPE = "text/xml; charset=utf-8"


class BillingSoapBridge(MixinAsyncCircuitBreaker):
    """Bridge between the broker and the billing SOAP endpoint.

    Args:
        config: Bridge configuration
        broker: Broker client used to publish billing events
        correlation_store: Receives ``(orderId, billingOrderId)`` pairs
        client: Optional pre-built httpx client (closed by the caller)
    """

    def __init__(
        self,
        config: ModelBillingBridgeConfig,
        broker: ProtocolBrokerClient,
        correlation_store: ProtocolCorrelationStore,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._broker = broker
        self._store = correlation_store
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout_ms / 1000),
        )
        self.failed_calls = 0
        self._init_circuit_breaker(
            threshold=config.availability_threshold,
            reset_timeout=config.retry_interval_ms / 1000,
            service_name="billing",
            transport_type=EnumInfraTransportType.SOAP,
        )

    @property
    def connection_state(self) -> EnumConnectionState:
        return self.circuit_state.as_connection_state()

    @property
    def is_connected(self) -> bool:
        return self.connection_state is EnumConnectionState.CONNECTED

    async def connect(self) -> bool:
        """Nothing to open; reports current availability."""
        return self.is_connected

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
        logger.info("BillingSoapBridge closed")

    # =========================================================================
    # SOAP calls
    # =========================================================================

    async def _call(
        self, action: str, envelope: bytes, correlation_id: UUID | None
    ) -> bytes:
        """POST one envelope and return the response body.

        Raises:
            InfraTimeoutError: The request timed out.
            InfraConnectionError: Connection failure or an HTTP error status
                without a SOAP fault body.
        """
        ctx = ModelInfraErrorContext.with_correlation(
            correlation_id=correlation_id,
            transport_type=EnumInfraTransportType.SOAP,
            operation=action,
            target_name=self.config.url,
        )
        try:
            try:
                response = await self._client.post(
                    self.config.url,
                    content=envelope,
                    headers={"Content-Type": _SOAP_CONTENT_TYPE, "SOAPAction": action},
                )
            except httpx.TimeoutException as e:
                raise InfraTimeoutError(
                    f"SOAP {action} timed out after {self.config.timeout_ms}ms",
                    context=ctx,
                    timeout_seconds=self.config.timeout_ms / 1000,
                ) from e
            except httpx.ConnectError as e:
                raise InfraConnectionError(
                    f"Failed to connect to {self.config.url}", context=ctx
                ) from e
            except httpx.HTTPError as e:
                raise InfraConnectionError(
                    f"HTTP error during SOAP {action}: {type(e).__name__}",
                    context=ctx,
                ) from e

            # SOAP 1.1 faults arrive as HTTP 500 with a Fault body.
            is_fault = response.status_code == 500 and b"Fault" in response.content
            if response.status_code >= 400 and not is_fault:
                raise InfraConnectionError(
                    f"SOAP {action} returned HTTP {response.status_code}",
                    context=ctx,
                    status_code=response.status_code,
                )
        except (InfraConnectionError, InfraTimeoutError):
            self.failed_calls += 1
            async with self._circuit_breaker_lock:
                await self._record_circuit_failure(action, ctx.correlation_id)
            raise

        async with self._circuit_breaker_lock:
            await self._reset_circuit_breaker()
        return response.content

    async def create_order(
        self, order: ModelOrderCreatedEvent, correlation_id: UUID | None = None
    ) -> ModelCreateOrderResponse:
        """Call ``CreateOrder``.

        Raises:
            ExternalProtocolError: SOAP fault or malformed response.
            InfraTimeoutError, InfraConnectionError: See ``_call``.
        """
        envelope = build_create_order_envelope(order, client_id=self.config.client_id)
        body = await self._call("CreateOrder", envelope, correlation_id)
        return parse_create_order_response(body)

    async def create_customer(
        self, user: ModelUserCreatedEvent, correlation_id: UUID | None = None
    ) -> ModelCreateCustomerResponse:
        envelope = build_create_customer_envelope(user)
        body = await self._call("CreateCustomer", envelope, correlation_id)
        return parse_create_customer_response(body)

    # =========================================================================
    # Broker handlers
    # =========================================================================

    async def handle_order_created(
        self, message: ModelBrokerMessage
    ) -> EnumMessageDisposition:
        order = ModelOrderCreatedEvent.from_payload(
            message.payload,
            operation="handle_order_created",
            correlation_id=message.correlation_id,
        )
        try:
            result = await self.create_order(order, message.correlation_id)
        except RuntimeHostError as e:
            logger.error(
                f"Billing order creation failed for {order.order_id}: {e}",
                extra={**e.to_log_extra(), "order_id": order.order_id},
            )
            return EnumMessageDisposition.ACK

        if not result.success:
            logger.warning(
                f"Billing rejected order {order.order_id}: {result.message}",
                extra={
                    "order_id": order.order_id,
                    "correlation_id": str(message.correlation_id),
                },
            )
            return EnumMessageDisposition.ACK

        event = ModelBillingOrderCreated(
            order_id=order.order_id,
            billing_order_id=result.cms_order_id,
            billing_ref=result.billing_ref,
            client_id=order.client_id or self.config.client_id,
            message=result.message,
        )
        if result.cms_order_id:
            await self._store.record_ack(order.order_id, result.cms_order_id)
        await self._broker.publish(
            self.config.publish_topic,
            topics.BILLING_ORDER_CREATED,
            event.to_wire(exclude_none=False),
            persistent=False,
            correlation_id=event.correlation_id,
        )
        logger.info(
            f"Billing order {result.cms_order_id} created for {order.order_id}",
            extra={
                "order_id": order.order_id,
                "billing_order_id": result.cms_order_id,
                "correlation_id": str(event.correlation_id),
            },
        )
        return EnumMessageDisposition.ACK

    async def handle_user_created(
        self, message: ModelBrokerMessage
    ) -> EnumMessageDisposition:
        user = ModelUserCreatedEvent.from_payload(
            message.payload,
            operation="handle_user_created",
            correlation_id=message.correlation_id,
        )
        try:
            result = await self.create_customer(user, message.correlation_id)
        except RuntimeHostError as e:
            logger.error(
                f"Billing customer creation failed for {user.user_id}: {e}",
                extra={**e.to_log_extra(), "user_id": user.user_id},
            )
            return EnumMessageDisposition.ACK

        if not result.success:
            logger.warning(
                f"Billing rejected customer {user.user_id}: {result.message}",
                extra={"user_id": user.user_id},
            )
            return EnumMessageDisposition.ACK

        event = ModelBillingCustomerCreated(
            user_id=user.user_id,
            billing_customer_id=result.customer_id,
            message=result.message,
        )
        await self._broker.publish(
            self.config.customer_topic,
            topics.BILLING_CUSTOMER_CREATED,
            event.to_wire(exclude_none=False),
            persistent=False,
            correlation_id=message.correlation_id,
        )
        return EnumMessageDisposition.ACK

    async def health_check(self) -> dict[str, object]:
        return {
            "healthy": self.is_connected,
            "state": self.connection_state.value,
            "circuit_state": self.circuit_state.value,
            "target": self.config.url,
            "failed_calls": self.failed_calls,
        }


__all__: list[str] = ["BillingSoapBridge"]
