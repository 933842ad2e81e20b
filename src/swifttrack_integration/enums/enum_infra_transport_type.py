# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Infrastructure Transport Type Enumeration.

Defines the canonical transport types used by the integration layer.
Used for error context, log correlation, and transport identification.
"""

from enum import Enum


class EnumInfraTransportType(str, Enum):
    """Transport types for SwiftTrack integration components.

    Attributes:
        KAFKA: Topic broker transport
        TCP: Line-delimited JSON over TCP (warehouse system)
        SOAP: SOAP/XML envelopes over HTTP (billing system)
        HTTP: HTTP/JSON REST transport (route optimizer)
        RUNTIME: Adapter runtime internal transport
    """

    KAFKA = "kafka"
    TCP = "tcp"
    SOAP = "soap"
    HTTP = "http"
    RUNTIME = "runtime"


__all__ = ["EnumInfraTransportType"]
