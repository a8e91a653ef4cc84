# solver_scipy.py
# All comments in English

import logging

import numpy as np
from scipy.optimize import linprog

from ..errors import RelaxationInfeasible, SolverError
from .helpers import LPSolveResult, finalize_fractional

logger = logging.getLogger(__name__)


def build_variable_index(instance):
    """
    Maps each x_{i,j} to a position in the flat variable vector (row-major,
    service first).
    """
    n_services, n_nodes = instance.shape
    return {(i, j): i * n_nodes + j for i in range(n_services) for j in range(n_nodes)}


def solve_lp(instance, eps=1e-6, time_limit=None):
    """
    Solves the placement LP relaxation with scipy.optimize.linprog (HiGHS):
      min  sum_ij cost_i * x_ij
      s.t. sum_j x_ij = 1                       for each service i
           sum_i req_id * x_ij <= cap_jd        for each node j, dimension d
           0 <= x_ij <= 1
    """
    instance.check_aggregate(eps)
    var_index = build_variable_index(instance)
    n_services, n_nodes = instance.shape
    n_vars = len(var_index)

    # Objective vector c
    c = np.zeros(n_vars)
    for (i, j), k in var_index.items():
        c[k] = instance.cost[i]

    # -------------------------------
    # Node capacity per dimension
    # -------------------------------
    A_ub, b_ub = [], []
    for j in range(n_nodes):
        for d in instance.active_dimensions():
            row = np.zeros(n_vars)
            for i in range(n_services):
                row[var_index[(i, j)]] = instance.req[i, d]
            A_ub.append(row)
            b_ub.append(instance.cap[j, d])

    # -------------------------------
    # Assignment: sum_j x_ij = 1
    # -------------------------------
    A_eq, b_eq = [], []
    for i in range(n_services):
        row = np.zeros(n_vars)
        for j in range(n_nodes):
            row[var_index[(i, j)]] = 1
        A_eq.append(row)
        b_eq.append(1.0)

    options = {"time_limit": time_limit} if time_limit else None
    res = linprog(c,
                  A_ub=np.array(A_ub) if A_ub else None,
                  b_ub=np.array(b_ub) if b_ub else None,
                  A_eq=np.array(A_eq),
                  b_eq=np.array(b_eq),
                  bounds=(0, 1),
                  method="highs",
                  options=options)

    # status: 0 optimal, 1 iteration/time limit, 2 infeasible, 3 unbounded, 4 numerical
    if res.status == 2:
        raise RelaxationInfeasible(f"LP relaxation infeasible: {res.message}")
    if res.status != 0 or res.x is None:
        raise SolverError(f"HiGHS did not return an optimal solution (status={res.status}): {res.message}")

    x = res.x.reshape(n_services, n_nodes)
    logger.info("[LP][HiGHS] Solved %d services x %d nodes, objective=%.4f", n_services, n_nodes, res.fun)
    return LPSolveResult(
        status_code=res.status,
        status_str="Optimal",
        objective=float(res.fun),
        x=finalize_fractional(x, instance, eps),
        backend="highs",
    )
