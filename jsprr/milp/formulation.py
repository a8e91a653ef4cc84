import numpy as np

from ..errors import EmptyInstanceError, RelaxationInfeasible
from ..resources import DIMENSIONS


class LPInstance:
    """
    Data container for the fractional placement LP.
    Holds a read-only snapshot of node capacities; building or solving it
    never touches the live ResourceNode counters.
    """
    def __init__(self, node_names, capacity, service_names, requirements, cost):
        # --- Index sets ---
        self.N = list(node_names)
        self.S = list(service_names)

        # --- Parameters ---
        self.cap = np.asarray(capacity, dtype=float).reshape(len(self.N), len(DIMENSIONS))
        self.req = np.asarray(requirements, dtype=float).reshape(len(self.S), len(DIMENSIONS))
        self.cost = np.asarray(cost, dtype=float).reshape(len(self.S))

        if not self.N or not self.S:
            raise EmptyInstanceError(
                f"Cannot build LP with {len(self.N)} nodes and {len(self.S)} services")

    @classmethod
    def from_entities(cls, nodes, services):
        nodes = list(nodes)
        services = list(services)
        return cls(
            node_names=[n.name for n in nodes],
            capacity=[tuple(n.capacity) for n in nodes],
            service_names=[s.name for s in services],
            requirements=[tuple(s.requirements) for s in services],
            cost=[s.cost for s in services],
        )

    @property
    def shape(self):
        return len(self.S), len(self.N)

    def active_dimensions(self):
        """Dimensions where at least one service asks for something."""
        return [d for d in range(len(DIMENSIONS)) if np.any(self.req[:, d] > 0)]

    def check_aggregate(self, eps=1e-6):
        """
        Necessary condition for feasibility: total demand per dimension
        must fit into total capacity.
        """
        for d in self.active_dimensions():
            demand = float(self.req[:, d].sum())
            capacity = float(self.cap[:, d].sum())
            if demand > capacity + eps:
                raise RelaxationInfeasible(
                    f"Aggregate {DIMENSIONS[d]} demand {demand:.3f} exceeds capacity {capacity:.3f}",
                    dimension=DIMENSIONS[d], demand=demand, capacity=capacity)

    def __repr__(self):
        return f"<LPInstance | nodes={len(self.N)} services={len(self.S)}>"
