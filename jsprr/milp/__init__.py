from .formulation import LPInstance
from .helpers import LPSolveResult, sanity_check_fractional
from .solver_pulp import solve_pulp
from .solver_scipy import solve_lp


def solve_relaxation(instance, backend="highs", eps=1e-6, msg=False, time_limit=None):
    if backend == "highs":
        return solve_lp(instance, eps=eps, time_limit=time_limit)
    if backend == "pulp":
        return solve_pulp(instance, eps=eps, msg=msg, time_limit=time_limit)
    raise ValueError(f"Unknown LP backend {backend!r}")
