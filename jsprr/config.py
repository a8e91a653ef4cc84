# All comments in English

from dataclasses import dataclass
from typing import Optional

BACKENDS = ("highs", "pulp")


@dataclass
class JSPRRConfig:
    """Runtime configuration for one placement run."""
    seed: Optional[int] = 42
    backend: str = "highs"          # "highs" (scipy) or "pulp" (CBC)
    eps: float = 1e-6               # capacity / row-sum tolerance
    path_weight: str = "latency"    # "latency" or "hops"
    reset_usage: bool = True        # start from empty nodes/links
    msg: bool = False               # solver console output
    time_limit: Optional[float] = None

    def __post_init__(self):
        if self.backend not in BACKENDS:
            raise ValueError(f"Unknown backend {self.backend!r}, expected one of {BACKENDS}")
        if self.path_weight not in ("latency", "hops"):
            raise ValueError(f"Unknown path weight {self.path_weight!r}")
        if self.eps < 0:
            raise ValueError("eps must be non-negative")
