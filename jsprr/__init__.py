from .config import JSPRRConfig
from .errors import (EmptyInstanceError,
                     JSPRRError,
                     MalformedInputRecord,
                     RelaxationInfeasible,
                     SolverError)
from .pipeline import solve_jsprr
from .resources import DIMENSIONS, CommDemand, ResourceNode, Resources, ServiceModule
from .result import JSPRRSolution, PlacementFailure, PlacementResult, RoutingFailure
from .topology import Link, Topology

__version__ = "0.1.0"
