"""Via connections and the layer-connectivity graph they form."""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from itfstack.config import STACK_RULES


class ViaType(str, Enum):
    CONTACT = "contact"
    METAL = "metal"
    OTHER = "other"


@dataclass
class ViaConnection:
    """A vertical connection between two named layers.

    ``z_position`` and ``height`` are resolved by the owning stack once
    both endpoint layers are known.
    """

    name: str
    from_layer: str
    to_layer: str
    area: float = 0.0
    resistance_per_via: float = 0.0
    z_position: float = 0.0
    height: float = 0.0

    @property
    def bottom_z(self) -> float:
        return self.z_position

    @property
    def top_z(self) -> float:
        return self.z_position + self.height

    @property
    def via_width(self) -> float:
        """Side of a square via with the declared area."""
        return math.sqrt(self.area) if self.area > 0 else 0.0

    def calculate_resistance(self, num_vias: int = 1) -> float:
        """Resistance of *num_vias* identical vias in parallel."""
        if num_vias <= 0:
            return math.inf
        return self.resistance_per_via / num_vias

    def connects_layers(self, a: str, b: str) -> bool:
        return (self.from_layer == a and self.to_layer == b) or (
            self.from_layer == b and self.to_layer == a
        )

    def other_end(self, layer: str) -> str:
        return self.to_layer if self.from_layer == layer else self.from_layer

    @property
    def via_type(self) -> ViaType:
        if STACK_RULES.is_contact_name(self.from_layer) or STACK_RULES.is_contact_name(self.to_layer):
            return ViaType.CONTACT
        if STACK_RULES.is_metal_name(self.from_layer) and STACK_RULES.is_metal_name(self.to_layer):
            return ViaType.METAL
        return ViaType.OTHER


@dataclass
class ViaStack:
    """Ordered via list plus a layer-name → via-index adjacency map."""

    vias: list[ViaConnection] = field(default_factory=list)
    adjacency: dict[str, list[int]] = field(default_factory=dict, init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        self._rebuild_adjacency()

    def _rebuild_adjacency(self) -> None:
        self.adjacency = {}
        for idx, via in enumerate(self.vias):
            self._index(idx, via)

    def _index(self, idx: int, via: ViaConnection) -> None:
        self.adjacency.setdefault(via.from_layer, []).append(idx)
        self.adjacency.setdefault(via.to_layer, []).append(idx)

    def add_via(self, via: ViaConnection) -> None:
        self.vias.append(via)
        self._index(len(self.vias) - 1, via)

    def __len__(self) -> int:
        return len(self.vias)

    def __iter__(self) -> Iterator[ViaConnection]:
        return iter(self.vias)

    def __bool__(self) -> bool:
        return bool(self.vias)

    # ── Queries ────────────────────────────────────────────────────

    def get_vias_for_layer(self, layer: str) -> list[ViaConnection]:
        return [self.vias[i] for i in self.adjacency.get(layer, [])]

    def get_via_between_layers(self, a: str, b: str) -> ViaConnection | None:
        for via in self.vias:
            if via.connects_layers(a, b):
                return via
        return None

    def get_connection_path(self, start: str, goal: str) -> list[ViaConnection] | None:
        """Fewest-via path from *start* to *goal*.

        Returns ``[]`` when start == goal and ``None`` when no path exists.
        Ties between equally short paths follow via insertion order.
        """
        if start == goal:
            return []

        visited = {start}
        parent: dict[str, tuple[str, int]] = {}
        queue = deque([start])

        while queue:
            layer = queue.popleft()
            if layer == goal:
                break
            for idx in self.adjacency.get(layer, []):
                nxt = self.vias[idx].other_end(layer)
                if nxt in visited:
                    continue
                visited.add(nxt)
                parent[nxt] = (layer, idx)
                queue.append(nxt)

        if goal not in parent:
            return None

        path: list[ViaConnection] = []
        node = goal
        while node != start:
            prev, idx = parent[node]
            path.append(self.vias[idx])
            node = prev
        path.reverse()
        return path
