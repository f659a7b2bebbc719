"""
infrastructure/interfaces.py

Base interface for planners in the PRW system.

Interface Contract:
    Every planner implements BasePlanner. This ensures:
    - A uniform solve() entry point returning a SequentialPlan
    - Requirement checking before any search work happens
    - Capability discovery for callers choosing a planner

Usage:
    from infrastructure.interfaces import BasePlanner

    class MyPlanner(BasePlanner):
        def solve(self, problem: PlanningProblem) -> SequentialPlan:
            self.check_supported(problem)
            ...

        def get_capabilities(self) -> List[str]:
            return ["strips", "forward_search"]
"""

from abc import ABC, abstractmethod
from typing import List

from component_2_plan import SequentialPlan
from component_3_planning_problem import UNSUPPORTED_REQUIREMENTS, PlanningProblem
from prw_exceptions import UnsupportedProblemError


class BasePlanner(ABC):
    """
    Abstract base class for planners.

    Subclasses may narrow or widen UNSUPPORTED to change which declared
    requirements disqualify a problem.

    Thread Safety:
        A planner instance owns its random generator and statistics; use
        one instance per thread.
    """

    UNSUPPORTED = UNSUPPORTED_REQUIREMENTS

    @abstractmethod
    def solve(self, problem: PlanningProblem) -> SequentialPlan:
        """
        Search a plan for the given problem.

        Args:
            problem: Ground planning problem

        Returns:
            SequentialPlan whose execution from the initial state
            satisfies the goal

        Raises:
            UnsupportedProblemError: If the problem declares an unsupported
                requirement (raised before searching)
        """

    @abstractmethod
    def get_capabilities(self) -> List[str]:
        """
        Return capability identifiers (lowercase, underscore-separated).
        """

    def is_supported(self, problem: PlanningProblem) -> bool:
        """True iff no declared requirement is in UNSUPPORTED."""
        return not problem.unsupported_requirements(self.UNSUPPORTED)

    def check_supported(self, problem: PlanningProblem) -> None:
        """
        Raise UnsupportedProblemError when is_supported() is False.
        """
        offending = problem.unsupported_requirements(self.UNSUPPORTED)
        if offending:
            raise UnsupportedProblemError(
                "Problem not supported",
                requirements=[r.value for r in offending],
                context={"problem": problem.name},
            )
