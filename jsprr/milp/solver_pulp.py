# milp/solver_pulp.py
# All comments in English

import logging

import numpy as np
import pulp
from pulp import LpMinimize, LpProblem, lpSum

from ..errors import RelaxationInfeasible, SolverError
from ..resources import DIMENSIONS
from .helpers import LPSolveResult, finalize_fractional

logger = logging.getLogger(__name__)


def solve_pulp(instance, eps=1e-6, msg=False, time_limit=None):
    """
    Solve the same placement LP with PuLP + CBC:
      - Variables: x[i,j] ∈ [0,1] continuous
      - Objective: min sum_ij cost_i * x[i,j]
      - Constraints: assignment sum_j x[i,j] = 1,
                     capacity sum_i req_id * x[i,j] <= cap_jd
    """
    instance.check_aggregate(eps)
    n_services, n_nodes = instance.shape
    S = range(n_services)
    N = range(n_nodes)

    # --- Problem ---
    prob = LpProblem("ServicePlacementRelaxation", LpMinimize)

    # --- Variables ---
    x = {(i, j): pulp.LpVariable(f"x_{i}_{j}", lowBound=0, upBound=1) for i in S for j in N}

    # --- Objective ---
    prob += lpSum(float(instance.cost[i]) * x[(i, j)] for i in S for j in N), "PlacementCost"

    # --- Constraints ---
    # (1) Assignment
    for i in S:
        prob += lpSum(x[(i, j)] for j in N) == 1, f"assign_{i}"

    # (2) Capacity per node and dimension
    for j in N:
        for d in instance.active_dimensions():
            prob += lpSum(float(instance.req[i, d]) * x[(i, j)] for i in S) <= float(instance.cap[j, d]), \
                    f"cap_{DIMENSIONS[d]}_{j}"

    # --- Solve with CBC ---
    solver = pulp.PULP_CBC_CMD(msg=msg, timeLimit=time_limit) if time_limit else pulp.PULP_CBC_CMD(msg=msg)
    prob.solve(solver)

    status_str = pulp.LpStatus[prob.status]
    if status_str == "Infeasible":
        raise RelaxationInfeasible("LP relaxation infeasible (CBC)")
    if status_str != "Optimal":
        raise SolverError(f"CBC did not return an optimal solution (status={status_str})")

    values = np.zeros((n_services, n_nodes))
    for (i, j), var in x.items():
        values[i, j] = var.value() or 0.0

    objective = pulp.value(prob.objective) or 0.0
    logger.info("[LP][CBC] Solved %d services x %d nodes, objective=%.4f", n_services, n_nodes, objective)
    return LPSolveResult(
        status_code=prob.status,
        status_str=status_str,
        objective=float(objective),
        x=finalize_fractional(values, instance, eps),
        backend="pulp",
    )
