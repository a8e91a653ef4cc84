# All comments in English

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np

from .resources import CommDemand


@dataclass(frozen=True)
class PlacementFailure:
    service: str
    reason: str = "no node with sufficient capacity"


@dataclass(frozen=True)
class RoutingFailure:
    index: int
    demand: CommDemand
    reason: str


@dataclass(frozen=True)
class PlacementResult:
    """
    Final integral placement: service name -> node name (None if unplaced),
    plus the links each routed demand reserved (keyed by demand index).
    """
    assignments: Mapping[str, Optional[str]]
    routes: Mapping[int, Tuple[str, ...]]
    placement_failures: Tuple[PlacementFailure, ...] = ()
    routing_failures: Tuple[RoutingFailure, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "assignments", MappingProxyType(dict(self.assignments)))
        object.__setattr__(self, "routes", MappingProxyType(dict(self.routes)))
        object.__setattr__(self, "placement_failures", tuple(self.placement_failures))
        object.__setattr__(self, "routing_failures", tuple(self.routing_failures))

    def node_of(self, service: str) -> Optional[str]:
        return self.assignments.get(service)

    @property
    def placed(self) -> Dict[str, str]:
        return {s: n for s, n in self.assignments.items() if n is not None}

    @property
    def unplaced(self) -> List[str]:
        return [f.service for f in self.placement_failures]

    @property
    def routed(self) -> List[int]:
        return sorted(self.routes)

    @property
    def unrouted(self) -> List[int]:
        return [f.index for f in self.routing_failures]


@dataclass
class JSPRRSolution:
    fractional: np.ndarray          # [service][node]
    service_names: List[str]
    node_names: List[str]
    placement: PlacementResult
    objective: Optional[float] = None
    backend: str = "highs"
    skipped_records: int = 0

    def fractional_row(self, service: str) -> Dict[str, float]:
        i = self.service_names.index(service)
        return dict(zip(self.node_names, self.fractional[i].tolist()))
