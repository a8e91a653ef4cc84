# All comments in English
import logging

import numpy as np

from .config import JSPRRConfig
from .errors import EmptyInstanceError
from .heuristics import run_randomized_rounding
from .milp import LPInstance, solve_relaxation
from .result import JSPRRSolution

logger = logging.getLogger(__name__)


def solve_jsprr(topology, services, demands=(), config=None, skipped_records=0):
    """
    Full pipeline: LP relaxation -> randomized rounding -> demand routing.

    Raises EmptyInstanceError / RelaxationInfeasible before any node or link
    counter is touched. Per-service and per-demand failures are reported on
    the returned solution's PlacementResult.
    """
    config = config or JSPRRConfig()
    services = list(services)
    demands = list(demands)
    nodes = list(topology.nodes.values())

    if not nodes or not services:
        raise EmptyInstanceError(f"Nothing to place: {len(nodes)} nodes, {len(services)} services")

    logger.info("[JSPRR] Solving relaxation for %d services on %d nodes (backend=%s)",
                len(services), len(nodes), config.backend)
    instance = LPInstance.from_entities(nodes, services)
    lp = solve_relaxation(instance, backend=config.backend, eps=config.eps,
                          msg=config.msg, time_limit=config.time_limit)

    if config.reset_usage:
        topology.reset_usage()

    placement = run_randomized_rounding(
        lp.x, topology, services, demands,
        rng=np.random.default_rng(config.seed),
        node_names=instance.N,
        weight=config.path_weight,
        eps=config.eps,
    )

    return JSPRRSolution(
        fractional=lp.x,
        service_names=list(instance.S),
        node_names=list(instance.N),
        placement=placement,
        objective=lp.objective,
        backend=lp.backend,
        skipped_records=skipped_records,
    )
