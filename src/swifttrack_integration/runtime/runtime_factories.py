# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Factories for the three adapter processes.

Each factory defaults to the Kafka broker client and an in-memory
correlation store; both are injectable for tests and local runs.
"""

from __future__ import annotations

from swifttrack_integration.bridges import (
    BillingSoapBridge,
    RouteOptimizerBridge,
    WarehouseLineBridge,
)
from swifttrack_integration.correlation import (
    InMemoryCorrelationStore,
    ProtocolCorrelationStore,
)
from swifttrack_integration.event_bus import KafkaBrokerClient, ProtocolBrokerClient
from swifttrack_integration.event_bus import topic_constants as topics
from swifttrack_integration.models.config import ModelIntegrationConfig
from swifttrack_integration.runtime.model_adapter_binding import ModelAdapterBinding
from swifttrack_integration.runtime.service_adapter_runtime import AdapterRuntime


def build_warehouse_runtime(
    config: ModelIntegrationConfig,
    *,
    broker: ProtocolBrokerClient | None = None,
    correlation_store: ProtocolCorrelationStore | None = None,
) -> AdapterRuntime:
    """``order.created`` -> warehouse; warehouse events -> ``wms.package.*``."""
    broker = broker or KafkaBrokerClient.from_config(config)
    store = correlation_store or InMemoryCorrelationStore()
    bridge = WarehouseLineBridge(config.warehouse, broker, store)
    return AdapterRuntime(
        name=f"wms-adapter:{config.warehouse.adapter_id}",
        broker=broker,
        bridges=[bridge],
        bindings=[
            ModelAdapterBinding(
                queue=config.warehouse.queue_name,
                topic=config.topology.orders,
                routing_key=topics.ORDER_CREATED,
                handler=bridge.handle_order_created,
            )
        ],
        correlation_store=store,
        status_interval=config.status_interval_seconds,
    )


def build_billing_runtime(
    config: ModelIntegrationConfig,
    *,
    broker: ProtocolBrokerClient | None = None,
    correlation_store: ProtocolCorrelationStore | None = None,
) -> AdapterRuntime:
    """``order.created`` and ``user.created`` -> billing SOAP calls."""
    broker = broker or KafkaBrokerClient.from_config(config)
    store = correlation_store or InMemoryCorrelationStore()
    bridge = BillingSoapBridge(config.billing, broker, store)
    return AdapterRuntime(
        name="cms-adapter",
        broker=broker,
        bridges=[bridge],
        bindings=[
            ModelAdapterBinding(
                queue=config.billing.queue_name,
                topic=config.topology.orders,
                routing_key=topics.ORDER_CREATED,
                handler=bridge.handle_order_created,
            ),
            ModelAdapterBinding(
                queue=config.billing.customer_queue_name,
                topic=config.topology.users,
                routing_key=topics.USER_CREATED,
                handler=bridge.handle_user_created,
            ),
        ],
        correlation_store=store,
        status_interval=config.status_interval_seconds,
    )


def build_route_runtime(
    config: ModelIntegrationConfig,
    *,
    broker: ProtocolBrokerClient | None = None,
) -> AdapterRuntime:
    """Route optimization and ETA requests -> route optimizer."""
    broker = broker or KafkaBrokerClient.from_config(config)
    bridge = RouteOptimizerBridge(config.route_optimizer, broker)
    queue = config.route_optimizer.queue_name
    return AdapterRuntime(
        name="ros-adapter",
        broker=broker,
        bridges=[bridge],
        bindings=[
            ModelAdapterBinding(
                queue=f"{queue}.optimize",
                topic=config.topology.logistics,
                routing_key=topics.ROUTE_OPTIMIZATION_REQUESTED,
                handler=bridge.handle_optimization_requested,
            ),
            ModelAdapterBinding(
                queue=f"{queue}.eta",
                topic=config.topology.logistics,
                routing_key=topics.ROUTE_ETA_REQUESTED,
                handler=bridge.handle_eta_requested,
            ),
        ],
        status_interval=config.status_interval_seconds,
    )


__all__: list[str] = [
    "build_billing_runtime",
    "build_route_runtime",
    "build_warehouse_runtime",
]
