# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for BillingSoapBridge using httpx.MockTransport."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from swifttrack_integration.bridges import BillingSoapBridge
from swifttrack_integration.bridges.util_soap_envelope import BILLING_NS, SOAP_ENV_NS
from swifttrack_integration.correlation import InMemoryCorrelationStore
from swifttrack_integration.enums import EnumConnectionState, EnumMessageDisposition
from swifttrack_integration.errors import (
    ExternalProtocolError,
    InfraConnectionError,
    MessageValidationError,
)
from swifttrack_integration.event_bus import InMemoryBrokerClient, ModelBrokerMessage
from swifttrack_integration.models.config import ModelIntegrationConfig
from swifttrack_integration.models.orders import ModelOrderCreatedEvent

Handler = Callable[[httpx.Request], httpx.Response]


def _soap_response(response_tag: str, fields: dict[str, str], status: int = 200) -> httpx.Response:
    children = "".join(f"<{k}>{v}</{k}>" for k, v in fields.items())
    body = (
        f'<soap:Envelope xmlns:soap="{SOAP_ENV_NS}"><soap:Body>'
        f'<{response_tag} xmlns="{BILLING_NS}">{children}</{response_tag}>'
        "</soap:Body></soap:Envelope>"
    )
    return httpx.Response(status, content=body.encode(), headers={"Content-Type": "text/xml"})


def _order_ok(request: httpx.Request) -> httpx.Response:
    return _soap_response(
        "CreateOrderResponse",
        {"Success": "true", "CmsOrderId": "CMS-1001", "BillingRef": "BR-1", "Message": "ok"},
    )


class _Recorder:
    """Mock transport handler that records requests."""

    def __init__(self, handler: Handler) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


@pytest.fixture
def make_bridge(
    integration_config: ModelIntegrationConfig,
    broker: InMemoryBrokerClient,
    correlation_store: InMemoryCorrelationStore,
) -> Callable[[Handler], BillingSoapBridge]:
    def factory(handler: Handler) -> BillingSoapBridge:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return BillingSoapBridge(
            integration_config.billing, broker, correlation_store, client=client
        )

    return factory


@pytest.fixture
def recorder() -> _Recorder:
    return _Recorder(_order_ok)


def _message(routing_key: str, payload: dict[str, object]) -> ModelBrokerMessage:
    topic = "users" if routing_key.startswith("user") else "orders"
    return ModelBrokerMessage(topic=topic, routing_key=routing_key, payload=payload)


class TestCreateOrder:
    """order.created -> CreateOrder -> billing.order.created."""

    @pytest.mark.asyncio
    async def test_success_publishes_billing_event(
        self,
        make_bridge: Callable[[Handler], BillingSoapBridge],
        recorder: _Recorder,
        broker: InMemoryBrokerClient,
        correlation_store: InMemoryCorrelationStore,
    ) -> None:
        """Test request headers, published payload and recorded correlation."""
        bridge = make_bridge(recorder)
        message = _message("order.created", {"orderId": "o123", "clientId": "c-1"})

        assert await bridge.handle_order_created(message) is EnumMessageDisposition.ACK

        request = recorder.requests[0]
        assert request.method == "POST"
        assert request.headers["SOAPAction"] == "CreateOrder"
        assert request.headers["Content-Type"] == "text/xml; charset=utf-8"
        assert b"<cms:ClientOrderRef>o123</cms:ClientOrderRef>" in request.content

        [event] = broker.published("billing.order.created")
        assert event.topic == "orders"
        assert event.persistent is False
        assert event.payload["orderId"] == "o123"
        assert event.payload["billingOrderId"] == "CMS-1001"
        assert event.payload["billingRef"] == "BR-1"
        assert event.payload["clientId"] == "c-1"
        assert event.payload["status"] == "billing_created"
        assert event.payload["correlationId"] != str(message.correlation_id)
        assert event.correlation_id != message.correlation_id
        assert await correlation_store.resolve_external("o123") == "CMS-1001"
        assert bridge.connection_state is EnumConnectionState.CONNECTED

    @pytest.mark.asyncio
    async def test_rejected_order_publishes_nothing(
        self,
        make_bridge: Callable[[Handler], BillingSoapBridge],
        broker: InMemoryBrokerClient,
    ) -> None:
        """Test Success=false is acknowledged without an event."""
        bridge = make_bridge(
            lambda _: _soap_response(
                "CreateOrderResponse", {"Success": "false", "Message": "bad client"}
            )
        )
        message = _message("order.created", {"orderId": "o1"})
        assert await bridge.handle_order_created(message) is EnumMessageDisposition.ACK
        assert broker.published("billing.order.created") == []

    @pytest.mark.asyncio
    async def test_fault_is_logged_and_acked(
        self,
        make_bridge: Callable[[Handler], BillingSoapBridge],
        broker: InMemoryBrokerClient,
    ) -> None:
        """Test a SOAP fault on HTTP 500 is acknowledged, not retried."""
        fault = (
            f'<soap:Envelope xmlns:soap="{SOAP_ENV_NS}"><soap:Body><soap:Fault>'
            "<faultstring>Internal</faultstring></soap:Fault></soap:Body></soap:Envelope>"
        )
        bridge = make_bridge(lambda _: httpx.Response(500, content=fault.encode()))
        message = _message("order.created", {"orderId": "o1"})
        assert await bridge.handle_order_created(message) is EnumMessageDisposition.ACK
        assert broker.published("billing.order.created") == []
        with pytest.raises(ExternalProtocolError, match="Internal"):
            await bridge.create_order(ModelOrderCreatedEvent(order_id="o1"))

    @pytest.mark.asyncio
    async def test_connection_error_marks_unavailable(
        self,
        make_bridge: Callable[[Handler], BillingSoapBridge],
        broker: InMemoryBrokerClient,
    ) -> None:
        """Test a transport failure is acked and reported as unavailable."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        bridge = make_bridge(refuse)
        message = _message("order.created", {"orderId": "o1"})
        assert await bridge.handle_order_created(message) is EnumMessageDisposition.ACK
        assert bridge.failed_calls == 1
        assert bridge.connection_state is EnumConnectionState.DISCONNECTED
        health = await bridge.health_check()
        assert health["healthy"] is False
        assert health["circuit_state"] == "open"
        assert broker.published("billing.order.created") == []

    @pytest.mark.asyncio
    async def test_order_after_failure_is_still_sent(
        self,
        make_bridge: Callable[[Handler], BillingSoapBridge],
        broker: InMemoryBrokerClient,
    ) -> None:
        """Test unavailability is reporting only: the next order is POSTed."""
        outcomes = iter([False, True])

        def flaky(request: httpx.Request) -> httpx.Response:
            if not next(outcomes):
                raise httpx.ConnectError("refused", request=request)
            return _order_ok(request)

        recorder = _Recorder(flaky)
        bridge = make_bridge(recorder)

        first = _message("order.created", {"orderId": "o1"})
        assert await bridge.handle_order_created(first) is EnumMessageDisposition.ACK
        assert bridge.connection_state is EnumConnectionState.DISCONNECTED

        second = _message("order.created", {"orderId": "o2"})
        assert await bridge.handle_order_created(second) is EnumMessageDisposition.ACK

        assert len(recorder.requests) == 2
        [event] = broker.published("billing.order.created")
        assert event.payload["orderId"] == "o2"
        assert bridge.connection_state is EnumConnectionState.CONNECTED
        assert bridge.failed_calls == 1

    @pytest.mark.asyncio
    async def test_http_error_status(
        self, make_bridge: Callable[[Handler], BillingSoapBridge]
    ) -> None:
        """Test a non-fault HTTP error is a connection error."""
        bridge = make_bridge(lambda _: httpx.Response(503, content=b"busy"))
        with pytest.raises(InfraConnectionError, match="503"):
            await bridge.create_order(ModelOrderCreatedEvent(order_id="o1"))

    @pytest.mark.asyncio
    async def test_invalid_order_raises_validation_error(
        self, make_bridge: Callable[[Handler], BillingSoapBridge], recorder: _Recorder
    ) -> None:
        """Test an order without orderId never reaches billing."""
        bridge = make_bridge(recorder)
        with pytest.raises(MessageValidationError):
            await bridge.handle_order_created(_message("order.created", {}))
        assert recorder.requests == []


class TestCreateCustomer:
    """user.created -> CreateCustomer -> billing.customer.created."""

    @pytest.mark.asyncio
    async def test_success_publishes_customer_event(
        self,
        make_bridge: Callable[[Handler], BillingSoapBridge],
        broker: InMemoryBrokerClient,
    ) -> None:
        """Test the customer event on the users topic."""
        recorder = _Recorder(
            lambda _: _soap_response(
                "CreateCustomerResponse",
                {"Success": "true", "CustomerID": "CUS-9", "Message": "created"},
            )
        )
        bridge = make_bridge(recorder)
        message = _message("user.created", {"userId": "u-1", "name": "Nimal"})

        assert await bridge.handle_user_created(message) is EnumMessageDisposition.ACK

        assert recorder.requests[0].headers["SOAPAction"] == "CreateCustomer"
        [event] = broker.published("billing.customer.created")
        assert event.topic == "users"
        assert event.correlation_id == message.correlation_id
        assert event.payload["userId"] == "u-1"
        assert event.payload["billingCustomerId"] == "CUS-9"

    @pytest.mark.asyncio
    async def test_failure_publishes_nothing(
        self,
        make_bridge: Callable[[Handler], BillingSoapBridge],
        broker: InMemoryBrokerClient,
    ) -> None:
        """Test a malformed response is acknowledged without an event."""
        bridge = make_bridge(lambda _: httpx.Response(200, content=b"not xml"))
        message = _message("user.created", {"userId": "u-1"})
        assert await bridge.handle_user_created(message) is EnumMessageDisposition.ACK
        assert broker.published("billing.customer.created") == []
