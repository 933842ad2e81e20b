# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""REST bridge to the external route optimizer.

Operations:
    optimize_route: POST {base_url}/optimize
    calculate_eta:  POST {base_url}/eta

Both authenticate with a bearer API key. Behaviour without a key, or when
the remote call fails, depends on ``fallback_mode``:

    local (default): no key or remote failure -> local fallback
    strict: no key -> OptimizerNotConfiguredError; remote failure propagates

Event surface:
    route.optimization.requested -> route.optimized | route.optimization.failed
    route.eta.requested          -> route.eta.calculated | route.eta.failed
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any
from uuid import UUID

import httpx
from pydantic import ValidationError

from swifttrack_integration.bridges.util_route_fallback import (
    fallback_eta,
    fallback_optimize,
)
from swifttrack_integration.enums import (
    EnumConnectionState,
    EnumInfraTransportType,
    EnumMessageDisposition,
    EnumOptimizerFallbackMode,
)
from swifttrack_integration.errors import (
    ExternalProtocolError,
    InfraConnectionError,
    InfraTimeoutError,
    ModelInfraErrorContext,
    OptimizerNotConfiguredError,
    RuntimeHostError,
)
from swifttrack_integration.event_bus import topic_constants as topics
from swifttrack_integration.event_bus.models import ModelBrokerMessage
from swifttrack_integration.event_bus.protocol_broker_client import (
    ProtocolBrokerClient,
)
from swifttrack_integration.mixins import MixinAsyncCircuitBreaker
from swifttrack_integration.models.config import ModelRouteOptimizerConfig
from swifttrack_integration.models.routing import (
    ModelCoordinates,
    ModelEtaRequest,
    ModelEtaResult,
    ModelRoute,
    ModelRouteOptimizationRequest,
    ModelRouteOptimizationResult,
    ModelRouteOptions,
    ModelRouteStep,
    ModelRouteStop,
    ModelVehicle,
)
from swifttrack_integration.utils import sanitize_error_message, utc_now, utc_now_iso

logger = logging.getLogger(__name__)

REMOTE_PROVIDER = "external"


def _parse_step(step: dict[str, Any]) -> ModelRouteStep:
    location = step.get("location") or {}
    coordinates = location.get("coordinates")
    return ModelRouteStep(
        id=str(step["id"]),
        type=step.get("type"),
        address=location.get("address"),
        coordinates=ModelCoordinates.model_validate(coordinates) if coordinates else None,
        distance=step.get("distance") or 0.0,
        duration=step.get("duration") or 0.0,
        arrival=step.get("arrival"),
        departure=step.get("departure"),
        description=step.get("description"),
    )


def parse_optimize_response(data: dict[str, Any]) -> ModelRouteOptimizationResult:
    """Translate an ``/optimize`` response body.

    Raises:
        KeyError, TypeError, ValueError: The body has an unexpected shape.
    """
    summary = data["summary"]
    routes = [
        ModelRoute(
            vehicle_id=str(route["vehicle_id"]),
            distance=route.get("distance") or 0.0,
            duration=route.get("duration") or 0.0,
            cost=route.get("cost") or 0.0,
            steps=[_parse_step(step) for step in route.get("steps") or []],
        )
        for route in data.get("routes") or []
    ]
    return ModelRouteOptimizationResult(
        optimized=True,
        provider=REMOTE_PROVIDER,
        total_distance=summary["total_distance"],
        total_duration=summary["total_time"],
        total_cost=summary.get("total_cost") or 0.0,
        routes=routes,
        unassigned=[str(u) for u in data.get("unassigned") or []],
        optimization_time=data.get("optimization_time"),
    )


class RouteOptimizerBridge(MixinAsyncCircuitBreaker):
    """Bridge to the route optimizer with a deterministic local fallback.

    ``broker`` is only needed by the event handlers; direct calls to
    ``optimize_route``/``calculate_eta`` work without one.
    """

    def __init__(
        self,
        config: ModelRouteOptimizerConfig,
        broker: ProtocolBrokerClient | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._broker = broker
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout_ms / 1000),
        )
        self.fallbacks_used = 0
        self._init_circuit_breaker(
            threshold=config.availability_threshold,
            reset_timeout=config.retry_interval_ms / 1000,
            service_name="route-optimizer",
            transport_type=EnumInfraTransportType.HTTP,
        )

    @property
    def strict(self) -> bool:
        return self.config.fallback_mode is EnumOptimizerFallbackMode.STRICT

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
        logger.info("RouteOptimizerBridge closed")

    # =========================================================================
    # Remote calls
    # =========================================================================

    def _api_key(self) -> str:
        key = self.config.api_key
        return key.get_secret_value() if key is not None else ""

    def _not_configured(
        self, operation: str, correlation_id: UUID | None
    ) -> OptimizerNotConfiguredError:
        return OptimizerNotConfiguredError(
            "Route optimizer API key not configured",
            context=ModelInfraErrorContext.with_correlation(
                correlation_id=correlation_id,
                transport_type=EnumInfraTransportType.HTTP,
                operation=operation,
                target_name=self.config.base_url,
            ),
        )

    async def _post_json(
        self,
        path: str,
        body: dict[str, Any],
        operation: str,
        correlation_id: UUID | None,
    ) -> dict[str, Any]:
        """POST ``body`` and return the decoded object with ``status == "success"``.

        Raises:
            InfraUnavailableError: Optimizer marked unavailable.
            InfraTimeoutError, InfraConnectionError: Transport failure or
                HTTP error status.
            ExternalProtocolError: Non-JSON body, non-object JSON, or a
                status other than ``success``.
        """
        url = f"{self.config.base_url.rstrip('/')}{path}"
        ctx = ModelInfraErrorContext.with_correlation(
            correlation_id=correlation_id,
            transport_type=EnumInfraTransportType.HTTP,
            operation=operation,
            target_name=url,
        )
        async with self._circuit_breaker_lock:
            await self._check_circuit_breaker(operation, ctx.correlation_id)

        try:
            try:
                response = await self._client.post(
                    url,
                    json=body,
                    headers={
                        "Authorization": f"Bearer {self._api_key()}"
                    },
                )
            except httpx.TimeoutException as e:
                raise InfraTimeoutError(
                    f"{operation} timed out after {self.config.timeout_ms}ms",
                    context=ctx,
                    timeout_seconds=self.config.timeout_ms / 1000,
                ) from e
            except httpx.ConnectError as e:
                raise InfraConnectionError(f"Failed to connect to {url}", context=ctx) from e
            except httpx.HTTPError as e:
                raise InfraConnectionError(
                    f"HTTP error during {operation}: {type(e).__name__}", context=ctx
                ) from e
            if response.status_code >= 400:
                raise InfraConnectionError(
                    f"{operation} returned HTTP {response.status_code}",
                    context=ctx,
                    status_code=response.status_code,
                )
        except (InfraConnectionError, InfraTimeoutError):
            async with self._circuit_breaker_lock:
                await self._record_circuit_failure(operation, ctx.correlation_id)
            raise

        async with self._circuit_breaker_lock:
            await self._reset_circuit_breaker()

        try:
            data = response.json()
        except ValueError as e:
            raise ExternalProtocolError(
                f"{operation} returned a non-JSON body", context=ctx
            ) from e
        if not isinstance(data, dict):
            raise ExternalProtocolError(
                f"{operation} returned {type(data).__name__}, expected object",
                context=ctx,
            )
        if data.get("status") != "success":
            raise ExternalProtocolError(
                f"{operation} failed: {data.get('message') or data.get('status')}",
                context=ctx,
                remote_status=data.get("status"),
            )
        return data

    async def optimize_route(
        self,
        stops: list[ModelRouteStop],
        vehicles: list[ModelVehicle],
        options: ModelRouteOptions | None = None,
        correlation_id: UUID | None = None,
    ) -> ModelRouteOptimizationResult:
        """Optimize stop order and vehicle assignment.

        Raises:
            OptimizerNotConfiguredError: Strict mode without an API key.
            RuntimeHostError: Strict mode and the remote call failed.
        """
        options = options or ModelRouteOptions()
        if not self.config.is_configured:
            if self.strict:
                raise self._not_configured("optimize_route", correlation_id)
            logger.warning("Route optimizer not configured, using local fallback")
            self.fallbacks_used += 1
            return fallback_optimize(stops, vehicles)

        body = {
            "optimization_profile": options.profile,
            "locations": [stop.to_remote() for stop in stops],
            "vehicles": [vehicle.to_remote() for vehicle in vehicles],
            "options": options.to_remote_optimize(),
        }
        try:
            data = await self._post_json(
                "/optimize", body, "optimize_route", correlation_id
            )
            try:
                return parse_optimize_response(data)
            except (KeyError, TypeError, ValueError, ValidationError) as e:
                raise ExternalProtocolError(
                    "Unexpected optimize_route response shape",
                    context=ModelInfraErrorContext.with_correlation(
                        correlation_id=correlation_id,
                        transport_type=EnumInfraTransportType.HTTP,
                        operation="optimize_route",
                        target_name=self.config.base_url,
                    ),
                ) from e
        except RuntimeHostError as e:
            if self.strict:
                raise
            logger.warning(
                f"Route optimization failed, falling back to local: {e}",
                extra=e.to_log_extra(),
            )
            self.fallbacks_used += 1
            return fallback_optimize(stops, vehicles)

    async def calculate_eta(
        self,
        origin: ModelCoordinates,
        destination: ModelCoordinates,
        options: ModelRouteOptions | None = None,
        correlation_id: UUID | None = None,
    ) -> ModelEtaResult:
        """ETA from ``origin`` to ``destination``; same fallback rules as routing."""
        options = options or ModelRouteOptions()
        if not self.config.is_configured:
            if self.strict:
                raise self._not_configured("calculate_eta", correlation_id)
            self.fallbacks_used += 1
            return fallback_eta(origin, destination)

        body = {
            "origin": {"coordinates": origin.to_remote()},
            "destination": {"coordinates": destination.to_remote()},
            "options": options.to_remote_eta(),
        }
        try:
            data = await self._post_json("/eta", body, "calculate_eta", correlation_id)
            try:
                duration = float(data["duration"])
                return ModelEtaResult(
                    distance=float(data["distance"]),
                    duration=duration,
                    eta=utc_now() + timedelta(seconds=duration),
                    route_geometry=data.get("route_geometry"),
                    traffic_considered=bool(data.get("traffic_considered", False)),
                    provider=REMOTE_PROVIDER,
                )
            except (KeyError, TypeError, ValueError) as e:
                raise ExternalProtocolError(
                    "Unexpected calculate_eta response shape",
                    context=ModelInfraErrorContext.with_correlation(
                        correlation_id=correlation_id,
                        transport_type=EnumInfraTransportType.HTTP,
                        operation="calculate_eta",
                        target_name=self.config.base_url,
                    ),
                ) from e
        except RuntimeHostError as e:
            if self.strict:
                raise
            logger.warning(
                f"ETA calculation failed, falling back to local: {e}",
                extra=e.to_log_extra(),
            )
            self.fallbacks_used += 1
            return fallback_eta(origin, destination)

    # =========================================================================
    # Broker handlers
    # =========================================================================

    async def _publish(
        self, routing_key: str, payload: dict[str, Any], correlation_id: UUID
    ) -> bool:
        if self._broker is None:
            logger.warning(
                f"No broker attached, dropping {routing_key}",
                extra={"routing_key": routing_key},
            )
            return False
        return await self._broker.publish(
            self.config.publish_topic,
            routing_key,
            payload,
            correlation_id=correlation_id,
        )

    @staticmethod
    def _request_ids(
        message: ModelBrokerMessage, request_id: str, order_id: str | None
    ) -> dict[str, Any]:
        return {
            "requestId": request_id,
            "orderId": order_id,
            "correlationId": message.payload.get("correlationId")
            or str(message.correlation_id),
        }

    async def handle_optimization_requested(
        self, message: ModelBrokerMessage
    ) -> EnumMessageDisposition:
        request = ModelRouteOptimizationRequest.from_payload(
            message.payload,
            operation="handle_optimization_requested",
            correlation_id=message.correlation_id,
        )
        ids = self._request_ids(message, request.request_id, request.order_id)
        try:
            result = await self.optimize_route(
                request.stops, request.vehicles, request.options, message.correlation_id
            )
        except RuntimeHostError as e:
            logger.error(
                f"Route optimization {request.request_id} failed: {e}",
                extra={**e.to_log_extra(), "request_id": request.request_id},
            )
            await self._publish(
                topics.ROUTE_OPTIMIZATION_FAILED,
                {**ids, "error": sanitize_error_message(e), "timestamp": utc_now_iso()},
                message.correlation_id,
            )
            return EnumMessageDisposition.ACK

        await self._publish(
            topics.ROUTE_OPTIMIZED,
            {**ids, **result.to_wire(exclude_none=False)},
            message.correlation_id,
        )
        logger.info(
            f"Route {request.request_id} optimized by {result.provider}",
            extra={
                "request_id": request.request_id,
                "order_id": request.order_id,
                "provider": result.provider,
            },
        )
        return EnumMessageDisposition.ACK

    async def handle_eta_requested(
        self, message: ModelBrokerMessage
    ) -> EnumMessageDisposition:
        request = ModelEtaRequest.from_payload(
            message.payload,
            operation="handle_eta_requested",
            correlation_id=message.correlation_id,
        )
        ids = self._request_ids(message, request.request_id, request.order_id)
        try:
            result = await self.calculate_eta(
                request.origin, request.destination, request.options, message.correlation_id
            )
        except RuntimeHostError as e:
            logger.error(
                f"ETA request {request.request_id} failed: {e}",
                extra={**e.to_log_extra(), "request_id": request.request_id},
            )
            await self._publish(
                topics.ROUTE_ETA_FAILED,
                {**ids, "error": sanitize_error_message(e), "timestamp": utc_now_iso()},
                message.correlation_id,
            )
            return EnumMessageDisposition.ACK

        await self._publish(
            topics.ROUTE_ETA_CALCULATED,
            {
                **ids,
                "origin": request.origin.to_wire(),
                "destination": request.destination.to_wire(),
                **result.to_wire(exclude_none=False),
                "timestamp": utc_now_iso(),
            },
            message.correlation_id,
        )
        return EnumMessageDisposition.ACK

    async def health_check(self) -> dict[str, object]:
        return {
            "healthy": self.is_connected,
            "state": self.connection_state.value,
            "circuit_state": self.circuit_state.value,
            "configured": self.config.is_configured,
            "fallback_mode": self.config.fallback_mode.value,
            "fallbacks_used": self.fallbacks_used,
        }


__all__: list[str] = ["RouteOptimizerBridge", "parse_optimize_response"]
