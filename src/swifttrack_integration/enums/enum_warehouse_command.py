# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Request/response command codes understood by the warehouse system."""

from enum import Enum


class EnumWarehouseCommand(str, Enum):
    """Command codes sent as ``{"type": "command", "command": <code>}`` lines."""

    PING = "PING"
    CHECK_INVENTORY = "INV_CHK"
    RESERVE_STOCK = "RES_STK"
    RELEASE_STOCK = "REL_STK"
    UPDATE_STOCK = "UPD_STK"
    CREATE_SHIPMENT = "CRT_SHP"
    UPDATE_SHIPMENT = "UPD_SHP"


__all__ = ["EnumWarehouseCommand"]
