# All comments in English


class JSPRRError(Exception):
    """Base class for fatal errors raised by the placement pipeline."""


class MalformedInputRecord(JSPRRError):
    """A node/link/service/demand record that cannot be resolved or is invalid."""


class EmptyInstanceError(JSPRRError):
    """Raised when there are no nodes or no services to place."""


class SolverError(JSPRRError):
    """The LP backend returned something unusable (not optimal, bad matrix)."""


class RelaxationInfeasible(JSPRRError):
    """
    The fractional placement LP has no solution.
    `dimension` is set when the aggregate pre-check found the culprit.
    """

    def __init__(self, message, dimension=None, demand=None, capacity=None):
        super().__init__(message)
        self.dimension = dimension
        self.demand = demand
        self.capacity = capacity
