# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Local route optimization and ETA used when the optimizer is unavailable.

Deterministic for identical inputs (timestamps aside):

    - distances are haversine kilometres
    - ETA duration is 90 seconds per kilometre
    - route steps take 60 seconds per kilometre and cost 0.5 per kilometre
    - vehicles take turns, in input order, claiming the nearest unclaimed
      stop from their current position; ties go to the earlier stop
    - a vehicle without a start location claims the first unclaimed stop
    - stops without coordinates are reported as unassigned
"""

from __future__ import annotations

from datetime import timedelta

from swifttrack_integration.models.routing import (
    ModelCoordinates,
    ModelEtaResult,
    ModelRoute,
    ModelRouteOptimizationResult,
    ModelRouteStep,
    ModelRouteStop,
    ModelVehicle,
)
from swifttrack_integration.utils import haversine_km, utc_now

ETA_SECONDS_PER_KM = 90.0
ROUTE_SECONDS_PER_KM = 60.0
COST_PER_KM = 0.5
FALLBACK_PROVIDER = "fallback"
FALLBACK_METHOD = "nearest-neighbor"


def distance_km(origin: ModelCoordinates, destination: ModelCoordinates) -> float:
    return haversine_km(
        origin.latitude, origin.longitude, destination.latitude, destination.longitude
    )


def _nearest(
    position: ModelCoordinates | None, candidates: list[ModelRouteStop]
) -> tuple[int, float]:
    if position is None:
        return 0, 0.0
    best_index, best_distance = 0, float("inf")
    for index, stop in enumerate(candidates):
        if stop.coordinates is None:
            continue
        d = distance_km(position, stop.coordinates)
        if d < best_distance:
            best_index, best_distance = index, d
    return best_index, best_distance


def fallback_optimize(
    stops: list[ModelRouteStop], vehicles: list[ModelVehicle]
) -> ModelRouteOptimizationResult:
    """Nearest-neighbour assignment of ``stops`` to ``vehicles``."""
    remaining = [s for s in stops if s.coordinates is not None]
    unassigned = [s.id for s in stops if s.coordinates is None]
    positions: list[ModelCoordinates | None] = [v.start_location for v in vehicles]
    steps: list[list[ModelRouteStep]] = [[] for _ in vehicles]

    while remaining and vehicles:
        for slot in range(len(vehicles)):
            if not remaining:
                break
            index, distance = _nearest(positions[slot], remaining)
            stop = remaining.pop(index)
            steps[slot].append(
                ModelRouteStep(
                    id=stop.id,
                    type=stop.type,
                    address=stop.address,
                    coordinates=stop.coordinates,
                    distance=distance,
                    duration=distance * ROUTE_SECONDS_PER_KM,
                    description=f"{stop.type} at {stop.address or stop.id}",
                )
            )
            positions[slot] = stop.coordinates

    unassigned.extend(s.id for s in remaining)
    routes = []
    for vehicle, vehicle_steps in zip(vehicles, steps):
        distance = sum(step.distance for step in vehicle_steps)
        routes.append(
            ModelRoute(
                vehicle_id=vehicle.id,
                distance=distance,
                duration=sum(step.duration for step in vehicle_steps),
                cost=distance * COST_PER_KM,
                steps=vehicle_steps,
            )
        )
    return ModelRouteOptimizationResult(
        optimized=False,
        provider=FALLBACK_PROVIDER,
        method=FALLBACK_METHOD,
        total_distance=sum(r.distance for r in routes),
        total_duration=sum(r.duration for r in routes),
        total_cost=sum(r.cost for r in routes),
        routes=routes,
        unassigned=unassigned,
    )


def fallback_eta(
    origin: ModelCoordinates, destination: ModelCoordinates
) -> ModelEtaResult:
    distance = distance_km(origin, destination)
    duration = distance * ETA_SECONDS_PER_KM
    return ModelEtaResult(
        distance=distance,
        duration=duration,
        eta=utc_now() + timedelta(seconds=duration),
        route_geometry=None,
        traffic_considered=False,
        provider=FALLBACK_PROVIDER,
    )


__all__: list[str] = [
    "COST_PER_KM",
    "ETA_SECONDS_PER_KM",
    "FALLBACK_METHOD",
    "FALLBACK_PROVIDER",
    "ROUTE_SECONDS_PER_KM",
    "distance_km",
    "fallback_eta",
    "fallback_optimize",
]
