import random

from ..resources import CommDemand


def generate_chain_demands(services, seed=42, bw_range=(10, 60)):
    """
    One demand per consecutive pair of services (s0->s1, s1->s2, ...),
    bandwidth drawn uniformly from [bw_range[0], bw_range[1]).
    """
    rnd = random.Random(seed)
    lo, hi = bw_range
    services = list(services)
    return [
        CommDemand(a.name, b.name, float(rnd.randrange(lo, hi)))
        for a, b in zip(services[:-1], services[1:])
    ]
