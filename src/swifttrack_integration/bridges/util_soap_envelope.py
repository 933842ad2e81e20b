# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""SOAP 1.1 envelopes for the billing system.

Requests are built with ElementTree so every text value is escaped.
Responses are parsed namespace-agnostically: only local element names
are compared, so ``<soap:Body>``, ``<Body>`` and ``<s:Body>`` all match.

Example:
    >>> body = build_create_order_envelope(order, client_id="c-9")
    >>> parse_create_order_response(response_bytes).cms_order_id
    'CMS-1001'
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from swifttrack_integration.enums import EnumInfraTransportType
from swifttrack_integration.errors import (
    ExternalProtocolError,
    ModelInfraErrorContext,
)
from swifttrack_integration.models.billing import (
    ModelCreateCustomerResponse,
    ModelCreateOrderResponse,
    ModelUserCreatedEvent,
)
from swifttrack_integration.models.orders import ModelOrderCreatedEvent

SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"
BILLING_NS = "http://swiftlogistics.cms/"

ET.register_namespace("soap", SOAP_ENV_NS)
ET.register_namespace("cms", BILLING_NS)


def _soap(tag: str) -> str:
    return f"{{{SOAP_ENV_NS}}}{tag}"


def _cms(tag: str) -> str:
    return f"{{{BILLING_NS}}}{tag}"


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(parent: ET.Element, tag: str, text: str | None = None) -> ET.Element:
    element = ET.SubElement(parent, _cms(tag))
    element.text = text or ""
    return element


def _envelope(request: ET.Element) -> bytes:
    envelope = ET.Element(_soap("Envelope"))
    body = ET.SubElement(envelope, _soap("Body"))
    body.append(request)
    return ET.tostring(envelope, encoding="utf-8", xml_declaration=True)


def build_create_order_envelope(order: ModelOrderCreatedEvent, client_id: str) -> bytes:
    """``CreateOrderRequest`` for ``order``; ``client_id`` is used when the order has none."""
    request = ET.Element(_cms("CreateOrderRequest"))
    _child(request, "ClientId", order.client_id or client_id)
    _child(request, "ClientOrderRef", order.order_id)
    _child(request, "PickupAddress", order.pickup)
    _child(request, "DeliveryAddress", order.delivery)
    items = _child(request, "Items")
    for item in order.items:
        entry = _child(items, "Item")
        _child(entry, "Name", item.name)
        _child(entry, "Qty", str(item.qty))
    _child(request, "Contact", order.contact)
    return _envelope(request)


def build_create_customer_envelope(user: ModelUserCreatedEvent) -> bytes:
    request = ET.Element(_cms("CreateCustomerRequest"))
    _child(request, "CustomerID", user.user_id)
    _child(request, "CustomerName", user.name)
    _child(request, "Email", user.email)
    _child(request, "Phone", user.phone)
    _child(request, "Status", user.customer_status)
    _child(request, "CustomerType", user.customer_type)
    return _envelope(request)


def _protocol_error(message: str, operation: str) -> ExternalProtocolError:
    return ExternalProtocolError(
        message,
        context=ModelInfraErrorContext.with_correlation(
            transport_type=EnumInfraTransportType.SOAP,
            operation=operation,
        ),
    )


def _response_fields(payload: bytes | str, response_tag: str) -> dict[str, str]:
    """Return ``{local name: text}`` of the response element's children.

    Raises:
        ExternalProtocolError: Malformed XML, a SOAP Fault, or no
            ``response_tag`` element in the body.
    """
    operation = f"parse_{response_tag}"
    try:
        root = ET.fromstring(payload)
    except ET.ParseError as e:
        raise _protocol_error(f"Malformed SOAP response: {e}", operation) from e

    for element in root.iter():
        name = _local(element.tag)
        if name == "Fault":
            fault = {_local(c.tag): (c.text or "").strip() for c in element}
            detail = fault.get("faultstring") or fault.get("Reason") or "unknown fault"
            raise _protocol_error(f"SOAP fault: {detail}", operation)
        if name == response_tag:
            return {_local(c.tag): (c.text or "").strip() for c in element}
    raise _protocol_error(f"SOAP response has no {response_tag}", operation)


def _is_true(value: str | None) -> bool:
    return (value or "").strip().lower() in ("true", "1")


def parse_create_order_response(payload: bytes | str) -> ModelCreateOrderResponse:
    fields = _response_fields(payload, "CreateOrderResponse")
    return ModelCreateOrderResponse(
        success=_is_true(fields.get("Success")),
        cms_order_id=fields.get("CmsOrderId") or None,
        billing_ref=fields.get("BillingRef") or None,
        message=fields.get("Message", ""),
    )


def parse_create_customer_response(payload: bytes | str) -> ModelCreateCustomerResponse:
    fields = _response_fields(payload, "CreateCustomerResponse")
    return ModelCreateCustomerResponse(
        success=_is_true(fields.get("Success")),
        customer_id=fields.get("CustomerID") or None,
        message=fields.get("Message", ""),
    )


__all__: list[str] = [
    "BILLING_NS",
    "SOAP_ENV_NS",
    "build_create_customer_envelope",
    "build_create_order_envelope",
    "parse_create_customer_response",
    "parse_create_order_response",
]
