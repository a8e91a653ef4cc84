# All comments in English
import logging

import numpy as np

from ..result import PlacementFailure, PlacementResult
from .routing import route_demands

logger = logging.getLogger(__name__)


def _as_generator(rng):
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def _capacity_order(nodes):
    """Deterministic scan order: declared capacity descending, then name."""
    return sorted(nodes, key=lambda n: (tuple(-v for v in n.capacity), n.name))


def candidate_order(weights, nodes, rng, eps=1e-6):
    """
    Order in which nodes are tried for one service:
      - all-zero row: every node by current load ascending (least loaded first)
      - otherwise: one node sampled from the weights, then the other
        positive-weight nodes by weight descending,
    followed in both cases by the remaining nodes in capacity order.
    """
    weights = np.clip(np.asarray(weights, dtype=float), 0.0, None)
    total = weights.sum()

    if total <= eps:
        first = sorted(nodes, key=lambda n: (n.load(), n.name))
    else:
        sampled = int(rng.choice(len(nodes), p=weights / total))
        rest = sorted((j for j in range(len(nodes)) if j != sampled and weights[j] > 0),
                      key=lambda j: (-weights[j], nodes[j].name))
        first = [nodes[sampled]] + [nodes[j] for j in rest]

    seen = {n.name for n in first}
    return first + [n for n in _capacity_order(nodes) if n.name not in seen]


def run_randomized_rounding(x, topology, services, demands=(), rng=None,
                            node_names=None, weight="latency", eps=1e-6):
    """
    Turn the fractional matrix x[service][node] into an integral placement,
    then route every demand between the chosen nodes.

    Rows of x follow `services`; columns follow `node_names` (default: the
    topology's node insertion order). Node and link usage counters are
    mutated in place and reflect the committed reservations on return.
    """
    rng = _as_generator(rng)
    services = list(services)
    node_names = list(node_names) if node_names is not None else list(topology.nodes)
    nodes = [topology.node(name) for name in node_names]

    x = np.asarray(x, dtype=float)
    if x.shape != (len(services), len(nodes)):
        raise ValueError(f"Fractional matrix shape {x.shape} does not match "
                         f"{len(services)} services x {len(nodes)} nodes")
    names = [s.name for s in services]
    if len(set(names)) != len(names):
        raise ValueError("Service names must be unique")

    assignments = {}
    failures = []

    # ---------- Placement ----------
    for i, service in enumerate(services):
        # A service lives on at most one node: drop any host left by an earlier run
        for host in topology.nodes.values():
            if host.undeploy(service):
                logger.info("[RR] Released %s from previous host %s", service.name, host.name)
        placed_on = None
        for node in candidate_order(x[i], nodes, rng, eps):
            if node.deploy(service):
                placed_on = node.name
                break

        assignments[service.name] = placed_on
        if placed_on is None:
            failures.append(PlacementFailure(service.name))
            logger.warning("[RR] Failed to place service %s: no node with sufficient capacity", service.name)
        else:
            node = topology.node(placed_on)
            logger.info("[RR] Placed %s on node %s (remaining=%s)", service.name, placed_on,
                        tuple(round(v, 3) for v in node.remaining))

    # ---------- Routing ----------
    routes, routing_failures = route_demands(demands, assignments, topology, weight=weight)

    logger.info("[RR] Summary: %d/%d services placed, %d/%d demands routed",
                len(services) - len(failures), len(services),
                len(routes), len(routes) + len(routing_failures))
    return PlacementResult(assignments, routes, failures, routing_failures)
