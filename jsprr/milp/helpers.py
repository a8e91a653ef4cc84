import logging
from dataclasses import dataclass

import numpy as np

from ..errors import SolverError
from ..resources import DIMENSIONS

logger = logging.getLogger(__name__)


@dataclass
class LPSolveResult:
    status_code: int
    status_str: str
    objective: float
    x: np.ndarray       # fractional assignment [service][node]
    backend: str


def sanity_check_fractional(x, instance, eps=1e-6):
    """
    Checks a fractional assignment against the LP constraints.
    Returns a list of human-readable violations (empty when x is feasible).
    """
    violations = []
    x = np.asarray(x, dtype=float)

    if x.shape != instance.shape:
        return [f"matrix shape {x.shape} != expected {instance.shape}"]

    if np.any(x < -eps) or np.any(x > 1 + eps):
        violations.append("values outside [0, 1]")

    # --- Row sums ---
    for i, total in enumerate(x.sum(axis=1)):
        if abs(total - 1.0) > eps:
            violations.append(f"service {instance.S[i]}: fractions sum to {total:.6f}")

    # --- Weighted node load per dimension ---
    load = x.T @ instance.req          # [node][dimension]
    for j, name in enumerate(instance.N):
        for d, dim in enumerate(DIMENSIONS):
            if load[j, d] > instance.cap[j, d] + eps:
                violations.append(
                    f"node {name}: {dim} load {load[j, d]:.6f} > cap {instance.cap[j, d]:.6f}")
    return violations


def finalize_fractional(x, instance, eps=1e-6):
    """Clip solver drift into [0, 1] and refuse matrices that break the constraints."""
    x = np.clip(np.asarray(x, dtype=float), 0.0, 1.0)
    violations = sanity_check_fractional(x, instance, eps)
    if violations:
        for v in violations:
            logger.error("[LP] %s", v)
        raise SolverError(f"Fractional solution violates {len(violations)} constraint(s): {violations[0]}")
    return x
