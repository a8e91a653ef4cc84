from .randomized_rounding import candidate_order, run_randomized_rounding
from .routing import reserve_path, route_demands
