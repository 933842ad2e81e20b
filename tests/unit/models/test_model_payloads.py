# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for domain event payload models."""

import pytest

from swifttrack_integration.errors import MessageValidationError
from swifttrack_integration.models.billing import ModelUserCreatedEvent
from swifttrack_integration.models.orders import ModelOrderCreatedEvent
from swifttrack_integration.models.routing import ModelCoordinates, ModelVehicle


class TestOrderCreatedEvent:
    """order.created payload parsing."""

    def test_address_objects_are_flattened(self) -> None:
        event = ModelOrderCreatedEvent.from_payload(
            {
                "orderId": "o1",
                "pickup": {"address": "1 Main St", "city": "Colombo"},
                "delivery": {"line1": "2 Side Rd", "city": "Kandy", "zip": None},
            }
        )
        assert event.pickup == "1 Main St"
        assert event.delivery == "2 Side Rd, Kandy"

    def test_numeric_ids_become_strings(self) -> None:
        event = ModelOrderCreatedEvent.from_payload({"orderId": 7, "clientId": 3})
        assert event.order_id == "7"
        assert event.client_id == "3"
        assert event.reference == "7"

    def test_item_aliases_and_extras(self) -> None:
        """Test sku/quantity aliases and pass-through of unknown item fields."""
        event = ModelOrderCreatedEvent.from_payload(
            {"orderId": "o1", "items": [{"sku": "A-1", "quantity": 4, "weight": 2.5}]}
        )
        [item] = event.items
        assert (item.name, item.qty) == ("A-1", 4)
        assert item.model_extra == {"weight": 2.5}

    def test_missing_order_id_message(self) -> None:
        with pytest.raises(MessageValidationError) as exc_info:
            ModelOrderCreatedEvent.from_payload({"clientId": "c"})
        assert str(exc_info.value) == (
            "Invalid ModelOrderCreatedEvent payload: missing orderId"
        )


class TestUserCreatedEvent:
    def test_id_aliases_and_derived_fields(self) -> None:
        user = ModelUserCreatedEvent.from_payload({"id": 12, "role": "admin", "active": False})
        assert user.user_id == "12"
        assert user.customer_type == "BUSINESS"
        assert user.customer_status == "INACTIVE"

    def test_defaults(self) -> None:
        user = ModelUserCreatedEvent.from_payload({"userId": "u-1"})
        assert user.customer_type == "INDIVIDUAL"
        assert user.customer_status == "ACTIVE"


class TestRoutingModels:
    def test_coordinate_aliases(self) -> None:
        short = ModelCoordinates.model_validate({"lat": 1.5, "lng": 2.5})
        long = ModelCoordinates.model_validate({"latitude": 1.5, "longitude": 2.5})
        assert short == long
        assert short.to_remote() == {"lat": 1.5, "lng": 2.5}

    def test_coordinate_range(self) -> None:
        with pytest.raises(ValueError):
            ModelCoordinates(latitude=91, longitude=0)

    def test_vehicle_end_defaults_to_start(self) -> None:
        vehicle = ModelVehicle.model_validate(
            {"id": "v1", "startLocation": {"lat": 1.0, "lng": 2.0}}
        )
        assert vehicle.to_remote()["end_location"] == {"lat": 1.0, "lng": 2.0}
