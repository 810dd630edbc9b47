"""
Exceptions raised by the sample-based planners.

A failed search is not an error: planners report it through
``PlanResult.found``. Exceptions are reserved for bad requests and for
broken tree invariants.
"""


class PlanningError(Exception):
    """Base class for all planner errors."""


class InvalidInput(PlanningError, ValueError):
    """
    Start or goal cannot be planned for.

    Raised before any sampling happens when an endpoint lies outside the
    grid or on an occupied cell.
    """


class InvariantViolation(PlanningError, RuntimeError):
    """
    The search tree is corrupt.

    Raised on duplicate node ids, parent cycles or dangling parent links.
    This always indicates a bug in tree maintenance, never a planning failure.
    """
