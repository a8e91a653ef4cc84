# All comments in English
import logging

from ..result import RoutingFailure

logger = logging.getLogger(__name__)


# ------------------------- helper: atomic path reservation -------------------------
def reserve_path(path, bandwidth):
    """
    Reserve `bandwidth` on every link of `path`, or on none of them.
    Links already reserved are released again if a later link refuses.
    """
    taken = []
    for link in path:
        if not link.reserve(bandwidth):
            for done in taken:
                done.release(bandwidth)
            logger.debug("[ROUTE] Insufficient bandwidth on %s need=%s have=%s",
                         link.link_id, bandwidth, link.residual)
            return False
        taken.append(link)
    return True


def route_demands(demands, assignments, topology, weight="latency"):
    """
    Route each demand, in input order, between the nodes hosting its two services.
    Returns ({demand index -> tuple of link ids}, [RoutingFailure]).
    """
    routes = {}
    failures = []

    for idx, demand in enumerate(demands):
        src_node = assignments.get(demand.service_a)
        dst_node = assignments.get(demand.service_b)
        if src_node is None or dst_node is None:
            failures.append(RoutingFailure(idx, demand, "endpoint unplaced"))
            logger.warning("[ROUTE] Demand %d (%s->%s) skipped: endpoint unplaced",
                           idx, demand.service_a, demand.service_b)
            continue

        path = topology.find_path(src_node, dst_node, weight=weight)
        if path is None:
            failures.append(RoutingFailure(idx, demand, "no path"))
            logger.warning("[ROUTE] Demand %d: no path between %s and %s", idx, src_node, dst_node)
            continue

        if not reserve_path(path, demand.bandwidth):
            failures.append(RoutingFailure(idx, demand, "insufficient bandwidth"))
            logger.warning("[ROUTE] Demand %d (%s->%s, bw=%s) unrouted: insufficient bandwidth",
                           idx, src_node, dst_node, demand.bandwidth)
            continue

        routes[idx] = tuple(link.link_id for link in path)
        logger.info("[ROUTE] Demand %d routed %s->%s over %d link(s)", idx, src_node, dst_node, len(path))

    return routes, failures
