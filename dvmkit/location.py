"""Machine positions and choice of the nearest machine."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from dvmkit.dto import DVMInfo, ResponseStock


@dataclass(frozen=True)
class Location:
    x: int = 0
    y: int = 0

    def distance_to(self, other_x: int, other_y: int) -> float:
        dx = self.x - other_x
        dy = self.y - other_y
        return math.sqrt(dx * dx + dy * dy)


class LocationManager:
    """Knows where this machine stands and picks the closest responder."""

    def __init__(self, x: int, y: int) -> None:
        self.location = Location(x, y)

    def calculate_nearest(self, responses: Iterable[ResponseStock]) -> DVMInfo:
        """Return the closest responder; the first wins ties, empty input gives defaults."""
        nearest = DVMInfo()
        best = math.inf
        for response in responses:
            dist = self.location.distance_to(response.x, response.y)
            if dist < best:
                best = dist
                nearest = DVMInfo(response.x, response.y, response.src_id)
        return nearest

    def get_location(self) -> Location:
        return self.location