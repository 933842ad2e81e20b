# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Handler invocation shared by every broker client implementation.

Maps the handler's outcome to a disposition:

    returned disposition           -> as returned
    MessageValidationError         -> DROP (retrying cannot fix it)
    InfraUnavailableError,
    InfraConnectionError,
    InfraTimeoutError              -> REQUEUE (transient)
    any other exception            -> DROP, logged with traceback

A REQUEUE for a message that already used up ``max_redeliveries``
becomes a DROP with an error log line.
"""

from __future__ import annotations

import logging

from swifttrack_integration.enums import EnumMessageDisposition
from swifttrack_integration.errors import (
    InfraConnectionError,
    InfraTimeoutError,
    InfraUnavailableError,
    MessageValidationError,
)
from swifttrack_integration.event_bus.models import ModelBrokerMessage
from swifttrack_integration.event_bus.protocol_broker_client import (
    BrokerMessageHandler,
)
from swifttrack_integration.utils import sanitize_error_message

logger = logging.getLogger(__name__)


def _message_extra(message: ModelBrokerMessage, queue: str) -> dict[str, object]:
    return {
        "queue": queue,
        "topic": message.topic,
        "routing_key": message.routing_key,
        "message_id": str(message.message_id),
        "correlation_id": str(message.correlation_id),
        "delivery_count": message.delivery_count,
        "order_id": message.payload.get("orderId"),
    }


async def dispatch_message(
    handler: BrokerMessageHandler,
    message: ModelBrokerMessage,
    *,
    queue: str,
    max_redeliveries: int | None = None,
) -> EnumMessageDisposition:
    """Invoke ``handler`` and return the disposition to apply."""
    try:
        disposition = await handler(message)
    except MessageValidationError as e:
        logger.warning(
            f"Invalid message on {queue}: {e}",
            extra={**_message_extra(message, queue), **e.to_log_extra()},
        )
        disposition = EnumMessageDisposition.DROP
    except (InfraUnavailableError, InfraConnectionError, InfraTimeoutError) as e:
        logger.warning(
            f"Downstream unavailable while handling message on {queue}, requeueing",
            extra={**_message_extra(message, queue), **e.to_log_extra()},
        )
        disposition = EnumMessageDisposition.REQUEUE
    except Exception as e:
        logger.exception(
            f"Handler failed for message on {queue}",
            extra={
                **_message_extra(message, queue),
                "error": sanitize_error_message(e),
                "error_type": type(e).__name__,
            },
        )
        disposition = EnumMessageDisposition.DROP

    if (
        disposition is EnumMessageDisposition.REQUEUE
        and max_redeliveries is not None
        and message.delivery_count > max_redeliveries
    ):
        logger.error(
            f"Message exceeded {max_redeliveries} redeliveries on {queue}, dropping",
            extra=_message_extra(message, queue),
        )
        return EnumMessageDisposition.DROP

    if disposition is EnumMessageDisposition.DROP:
        logger.warning(
            f"Dropped message {message.routing_key} on {queue}",
            extra=_message_extra(message, queue),
        )
    return disposition


__all__: list[str] = ["dispatch_message"]
