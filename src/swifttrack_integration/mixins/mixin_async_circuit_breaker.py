# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Coroutine-safe async circuit breaker mixin for the HTTP-based bridges.

The SOAP and REST bridges hold no persistent connection, so their
connection state machine degrades to available/unavailable based on the
outcome of recent calls. This mixin tracks that outcome:

Circuit Breaker States:
    - CLOSED: Available, requests allowed
    - OPEN: Unavailable, requests fail fast with InfraUnavailableError
    - HALF_OPEN: Retry interval elapsed, the next request is a trial call

With ``threshold=1`` (the bridge default) availability follows the last
call's outcome exactly.

Usage:
    ```python
    class BillingSoapBridge(MixinAsyncCircuitBreaker):
        def __init__(self, config):
            self._init_circuit_breaker(
                threshold=config.availability_threshold,
                reset_timeout=config.retry_interval_ms / 1000,
                service_name="billing",
                transport_type=EnumInfraTransportType.SOAP,
            )

        async def create_order(self, order, correlation_id):
            async with self._circuit_breaker_lock:
                await self._check_circuit_breaker("create_order", correlation_id)
            try:
                result = await self._post(...)
            except InfraConnectionError:
                async with self._circuit_breaker_lock:
                    await self._record_circuit_failure("create_order", correlation_id)
                raise
            async with self._circuit_breaker_lock:
                await self._reset_circuit_breaker()
            return result
    ```

Concurrency Safety:
    All circuit breaker methods require the caller to hold
    ``_circuit_breaker_lock``. asyncio.Lock gives coroutine safety only.
"""

from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from uuid import UUID, uuid4

from swifttrack_integration.enums import EnumConnectionState, EnumInfraTransportType
from swifttrack_integration.errors import InfraUnavailableError, ModelInfraErrorContext

logger = logging.getLogger(__name__)


class CircuitState(str, Enum):
    """Circuit breaker state machine.

    State Transitions:
        CLOSED -> OPEN: Failure count >= threshold
        OPEN -> HALF_OPEN: reset_timeout elapsed since opening
        HALF_OPEN -> CLOSED: First successful operation
        HALF_OPEN -> OPEN: First failed operation
    """

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

    def as_connection_state(self) -> EnumConnectionState:
        """Project the circuit onto the shared connection state machine."""
        return _CONNECTION_STATES[self]


_CONNECTION_STATES: dict[CircuitState, EnumConnectionState] = {
    CircuitState.CLOSED: EnumConnectionState.CONNECTED,
    CircuitState.OPEN: EnumConnectionState.DISCONNECTED,
    CircuitState.HALF_OPEN: EnumConnectionState.CONNECTING,
}


class MixinAsyncCircuitBreaker:
    """Async circuit breaker mixin tracking downstream availability.

    State Variables:
        _circuit_breaker_failures: Consecutive failure counter
        _circuit_breaker_open: Circuit open/closed state (True = open)
        _circuit_breaker_open_until: Timestamp after which a trial call is allowed
        _circuit_breaker_lock: asyncio.Lock for coroutine-safe access

    Configuration Variables:
        circuit_breaker_threshold: Failures before opening
        circuit_breaker_reset_timeout: Seconds before a trial call is allowed
        service_name: Service identifier for error context
        transport_type: Transport type for error context
    """

    def _init_circuit_breaker(
        self,
        threshold: int = 5,
        reset_timeout: float = 60.0,
        service_name: str = "unknown",
        transport_type: EnumInfraTransportType = EnumInfraTransportType.HTTP,
    ) -> None:
        """Initialize circuit breaker state and configuration.

        Raises:
            ValueError: If threshold < 1 or reset_timeout < 0
        """
        if threshold < 1:
            raise ValueError(f"Circuit breaker threshold must be >= 1, got {threshold}")
        if reset_timeout < 0:
            raise ValueError(
                f"Circuit breaker reset_timeout must be >= 0, got {reset_timeout}"
            )

        self._circuit_breaker_failures = 0
        self._circuit_breaker_open = False
        self._circuit_breaker_open_until: float = 0.0

        self.circuit_breaker_threshold = threshold
        self.circuit_breaker_reset_timeout = reset_timeout
        self.service_name = service_name
        self.transport_type = transport_type

        self._circuit_breaker_lock = asyncio.Lock()

        logger.debug(
            f"Circuit breaker initialized for {service_name}",
            extra={
                "threshold": threshold,
                "reset_timeout": reset_timeout,
                "transport_type": transport_type.value,
            },
        )

    @property
    def circuit_state(self) -> CircuitState:
        """Current circuit state (lock-free read for status reporting)."""
        if not self._circuit_breaker_open:
            return CircuitState.CLOSED
        if time.time() >= self._circuit_breaker_open_until:
            return CircuitState.HALF_OPEN
        return CircuitState.OPEN

    async def _check_circuit_breaker(
        self, operation: str, correlation_id: UUID | None = None
    ) -> None:
        """Raise InfraUnavailableError while the circuit is open.

        REQUIRES: self._circuit_breaker_lock must be held by caller.

        Raises:
            InfraUnavailableError: Circuit open and retry interval not elapsed.
                Extra context: ``circuit_state``, ``retry_after_seconds``.
        """
        if not self._circuit_breaker_lock.locked():
            logger.error(
                "Circuit breaker lock not held during state check",
                extra={"service": self.service_name, "operation": operation},
            )

        current_time = time.time()

        if self._circuit_breaker_open:
            if current_time >= self._circuit_breaker_open_until:
                self._circuit_breaker_open = False
                self._circuit_breaker_failures = 0
                logger.info(
                    f"Circuit breaker transitioning to half-open for {self.service_name}",
                    extra={"service": self.service_name, "operation": operation},
                )
            else:
                retry_after = int(self._circuit_breaker_open_until - current_time)
                context = ModelInfraErrorContext(
                    transport_type=self.transport_type,
                    operation=operation,
                    target_name=self.service_name,
                    correlation_id=correlation_id if correlation_id else uuid4(),
                )
                raise InfraUnavailableError(
                    f"{self.service_name} temporarily unavailable",
                    context=context,
                    circuit_state="open",
                    retry_after_seconds=retry_after,
                )

    async def _record_circuit_failure(
        self, operation: str, correlation_id: UUID | None = None
    ) -> None:
        """Count a failure and open the circuit at the threshold.

        REQUIRES: self._circuit_breaker_lock must be held by caller.
        """
        if not self._circuit_breaker_lock.locked():
            logger.error(
                "Circuit breaker lock not held during failure recording",
                extra={"service": self.service_name, "operation": operation},
            )

        self._circuit_breaker_failures += 1

        if self._circuit_breaker_failures >= self.circuit_breaker_threshold:
            self._circuit_breaker_open = True
            self._circuit_breaker_open_until = (
                time.time() + self.circuit_breaker_reset_timeout
            )

            logger.warning(
                f"{self.service_name} marked unavailable after "
                f"{self._circuit_breaker_failures} failure(s)",
                extra={
                    "service": self.service_name,
                    "operation": operation,
                    "failure_count": self._circuit_breaker_failures,
                    "threshold": self.circuit_breaker_threshold,
                    "retry_after_seconds": self.circuit_breaker_reset_timeout,
                    "correlation_id": str(correlation_id) if correlation_id else None,
                },
            )

    async def _reset_circuit_breaker(self) -> None:
        """Close the circuit after a successful call.

        REQUIRES: self._circuit_breaker_lock must be held by caller.
        """
        if not self._circuit_breaker_lock.locked():
            logger.error(
                "Circuit breaker lock not held during reset",
                extra={"service": self.service_name},
            )

        if self._circuit_breaker_open or self._circuit_breaker_failures > 0:
            previous_state = "open" if self._circuit_breaker_open else "closed"
            logger.info(
                f"{self.service_name} available again",
                extra={
                    "service": self.service_name,
                    "previous_state": previous_state,
                    "previous_failures": self._circuit_breaker_failures,
                },
            )

        self._circuit_breaker_open = False
        self._circuit_breaker_failures = 0
        self._circuit_breaker_open_until = 0.0


__all__ = ["CircuitState", "MixinAsyncCircuitBreaker"]
