"""
Component 5: Pure Random Walk Planner

Stochastic local search with restarts:
- Uniform random walk over applicable actions
- Plateau detection (stagnation counter against the best heuristic value)
- Dead-end detection (no applicable action)
- Restart from the initial state on plateau or dead end
- Optional search budget and cancellation signal

Without a budget the search runs until it finds a plan. If the goal is
unreachable, or only reachable through states the walk never samples, it
never returns. Callers that cannot afford that pass a SearchBudget or a
cancel event and get SearchExhaustedError / SearchCancelledError instead.

Author: PRW Development Team
"""

import random
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from common.constants import (
    DEFAULT_HEURISTIC,
    DEFAULT_HEURISTIC_WEIGHT,
    HEURISTIC_CACHE_MAXSIZE,
    MAX_STEPS,
)
from component_1_state_model import Action, State
from component_15_logging_config import PerformanceLogger, get_logger
from component_2_plan import SequentialPlan
from component_3_planning_problem import PlanningProblem
from component_4_heuristics import Heuristic, HeuristicName, get_heuristic
from infrastructure.interfaces import BasePlanner
from prw_exceptions import (
    InvalidConfigError,
    SearchCancelledError,
    SearchExhaustedError,
)

logger = get_logger(__name__)

RESTART_PLATEAU = "plateau"
RESTART_DEAD_END = "dead_end"


# ============================================================================
# Search State
# ============================================================================


@dataclass
class SearchContext:
    """
    Mutable state of one search, owned by a single solve() call.

    Attributes:
        problem: Problem being solved
        heuristic: Oracle queried after every step
        state: Current state of the walk
        plan: Actions applied since the last restart
        hmin: Best heuristic value seen since the last restart
        counter: Steps since hmin last improved (stagnation counter)
        steps_since_restart: Effect applications since the last restart
    """

    problem: PlanningProblem
    heuristic: Heuristic
    state: State
    plan: SequentialPlan
    hmin: int
    counter: int = 0
    steps_since_restart: int = 0


@dataclass
class SearchBudget:
    """
    Optional limits that turn endless search into SearchExhaustedError.

    Attributes:
        max_iterations: Loop iterations (steps plus restarts)
        max_restarts: Restarts from the initial state
        time_limit: Wall-clock seconds
    """

    max_iterations: Optional[int] = None
    max_restarts: Optional[int] = None
    time_limit: Optional[float] = None

    def __post_init__(self):
        for name in ("max_iterations", "max_restarts", "time_limit"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise InvalidConfigError(
                    f"{name} must be >= 0, got {value}", parameter=name
                )

    def is_unbounded(self) -> bool:
        return (
            self.max_iterations is None
            and self.max_restarts is None
            and self.time_limit is None
        )


# ============================================================================
# Random Walk Planner
# ============================================================================


class RandomWalkPlanner(BasePlanner):
    """
    Pure random walk planner with plateau and dead-end restarts.

    Each iteration either returns the plan (goal reached), restarts
    (stagnation counter above max_steps, or no applicable action), or takes
    one uniformly random applicable action and updates the stagnation
    counter from the new heuristic value.

    Randomness comes only from the injected generator (rng) or a private
    random.Random(seed); the module-level random functions are never used.
    """

    def __init__(
        self,
        heuristic: Union[str, HeuristicName, Heuristic] = DEFAULT_HEURISTIC,
        heuristic_weight: float = DEFAULT_HEURISTIC_WEIGHT,
        max_steps: int = MAX_STEPS,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        budget: Optional[SearchBudget] = None,
        cancel_event: Optional[Any] = None,
        heuristic_cache_size: int = HEURISTIC_CACHE_MAXSIZE,
    ):
        """
        Initialize planner.

        Args:
            heuristic: HeuristicName (or its string) resolved per problem,
                or a ready Heuristic instance used as is
            heuristic_weight: Kept for configuration compatibility; the walk
                compares raw estimates
            max_steps: Stagnation limit before a plateau restart
            rng: Random generator exposing randrange(n)
            seed: Seed for a private generator (ignored when rng is given)
            budget: Optional iteration/restart/time limits
            cancel_event: Object with is_set(), e.g. threading.Event
            heuristic_cache_size: LRU size for heuristic memoization (0 = off)
        """
        if heuristic_weight <= 0:
            raise InvalidConfigError(
                f"heuristic_weight must be > 0, got {heuristic_weight}",
                parameter="heuristic_weight",
            )
        if max_steps < 0:
            raise InvalidConfigError(
                f"max_steps must be >= 0, got {max_steps}", parameter="max_steps"
            )
        if rng is not None and seed is not None:
            raise InvalidConfigError(
                "Pass either rng or seed, not both", parameter="seed"
            )

        if isinstance(heuristic, Heuristic):
            self.heuristic_name: Optional[HeuristicName] = None
            self._heuristic: Optional[Heuristic] = heuristic
        else:
            self.heuristic_name = HeuristicName.parse(heuristic)
            self._heuristic = None

        self.heuristic_weight = heuristic_weight
        self.max_steps = max_steps
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)
        self.budget = budget or SearchBudget()
        self.cancel_event = cancel_event
        self.heuristic_cache_size = heuristic_cache_size
        self.stats: Dict[str, Any] = self._empty_stats()

    @staticmethod
    def _empty_stats() -> Dict[str, Any]:
        return {
            "iterations": 0,
            "steps": 0,
            "restarts": 0,
            "dead_end_restarts": 0,
            "plateau_restarts": 0,
            "heuristic_evaluations": 0,
            "plan_length": 0,
            "hmin": None,
        }

    def create_heuristic(self, problem: PlanningProblem) -> Heuristic:
        """Return the configured oracle, instantiated for problem if needed."""
        if self._heuristic is not None:
            return self._heuristic
        return get_heuristic(
            self.heuristic_name,
            actions=problem.actions,
            cache_size=self.heuristic_cache_size,
        )

    # ------------------------------------------------------------------------
    # Main entry point
    # ------------------------------------------------------------------------

    def solve(self, problem: PlanningProblem) -> SequentialPlan:
        """
        Search a plan with random walks restarted from the initial state.

        Args:
            problem: Ground planning problem

        Returns:
            SequentialPlan reaching the goal from the initial state

        Raises:
            UnsupportedProblemError: Before searching, if the problem declares
                an unsupported requirement
            SearchExhaustedError: If the configured budget runs out
            SearchCancelledError: If the cancel event gets set
        """
        self.check_supported(problem)

        heuristic = self.create_heuristic(problem)
        self.stats = self._empty_stats()

        logger.info(
            f"Starting random walk search on {problem.name}",
            extra={
                "facts": len(problem.initial_state),
                "actions": len(problem.actions),
                "heuristic": self._heuristic_label(heuristic),
                "max_steps": self.max_steps,
            },
        )

        with PerformanceLogger(
            logger.logger, "RandomWalkPlanner.solve", problem=problem.name
        ):
            plan = self._search(problem, heuristic)

        self.stats["plan_length"] = plan.size()
        logger.info(
            f"Plan found with {plan.size()} steps.",
            extra={
                "iterations": self.stats["iterations"],
                "restarts": self.stats["restarts"],
            },
        )
        return plan

    def _search(self, problem: PlanningProblem, heuristic: Heuristic) -> SequentialPlan:
        context = self.start(problem, heuristic)
        deadline = (
            time.monotonic() + self.budget.time_limit
            if self.budget.time_limit is not None
            else None
        )

        while True:
            self._check_cancelled()

            if problem.is_goal(context.state):
                return context.plan

            self._check_budget(deadline)
            self.stats["iterations"] += 1

            # Reused for the dead-end test instead of a second full scan
            applicable = problem.get_applicable_actions(context.state)

            if not applicable or context.counter > self.max_steps:
                reason = RESTART_DEAD_END if not applicable else RESTART_PLATEAU
                self._check_restart_budget()
                self.restart(context, reason=reason)
            else:
                self.walk_step(context, applicable)

    # ------------------------------------------------------------------------
    # Step-level operations
    # ------------------------------------------------------------------------

    def start(self, problem: PlanningProblem, heuristic: Heuristic) -> SearchContext:
        """Create a fresh search context at the problem's initial state."""
        hmin = self._estimate(heuristic, problem.initial_state, problem)
        self.stats["hmin"] = hmin
        return SearchContext(
            problem=problem,
            heuristic=heuristic,
            state=problem.initial_state,
            plan=SequentialPlan(),
            hmin=hmin,
        )

    def restart(self, context: SearchContext, reason: str = RESTART_PLATEAU) -> None:
        """
        Reset the context to the initial state.

        State, plan, stagnation counter and hmin are all reinitialized;
        hmin is recomputed from the initial state on every restart.
        """
        problem = context.problem
        hmin = self._estimate(context.heuristic, problem.initial_state, problem)

        context.state = problem.initial_state
        context.plan.clear()
        context.counter = 0
        context.steps_since_restart = 0
        context.hmin = hmin

        self.stats["restarts"] += 1
        if reason == RESTART_DEAD_END:
            self.stats["dead_end_restarts"] += 1
        else:
            self.stats["plateau_restarts"] += 1
        self.stats["hmin"] = hmin

        logger.debug(
            "Restart from initial state",
            extra={"reason": reason, "restarts": self.stats["restarts"], "hmin": hmin},
        )

    def walk_step(
        self, context: SearchContext, applicable: Optional[Sequence[Action]] = None
    ) -> Optional[int]:
        """
        Take one uniformly random applicable action.

        Args:
            context: Search context to advance
            applicable: Actions applicable in context.state (computed if None)

        Returns:
            Heuristic value of the successor, or None at a dead end (the
            context is left untouched)
        """
        if applicable is None:
            applicable = context.problem.get_applicable_actions(context.state)
        if not applicable:
            return None

        action = applicable[self.rng.randrange(len(applicable))]
        context.plan.append(action)
        context.state = action.effect.apply_to(context.state)
        context.steps_since_restart += 1
        self.stats["steps"] += 1

        h = self._estimate(context.heuristic, context.state, context.problem)
        if h < context.hmin:
            context.hmin = h
            context.counter = 0
            self.stats["hmin"] = h
        else:
            context.counter += 1
        return h

    def is_dead_end(self, state: State, problem: PlanningProblem) -> bool:
        """True iff no action of the problem is applicable in state."""
        return not any(action.is_applicable(state) for action in problem.actions)

    # ------------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------------

    def _estimate(self, heuristic: Heuristic, state: State, problem: PlanningProblem) -> int:
        self.stats["heuristic_evaluations"] += 1
        return heuristic.estimate(state, problem.goal)

    def _check_cancelled(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            logger.warning("Search cancelled", extra=self._progress())
            raise SearchCancelledError(
                "Search cancelled",
                iterations=self.stats["iterations"],
                restarts=self.stats["restarts"],
            )

    def _check_budget(self, deadline: Optional[float]) -> None:
        limit = self.budget.max_iterations
        if limit is not None and self.stats["iterations"] >= limit:
            self._exhausted("max_iterations")
        if deadline is not None and time.monotonic() >= deadline:
            self._exhausted("time_limit")

    def _check_restart_budget(self) -> None:
        limit = self.budget.max_restarts
        if limit is not None and self.stats["restarts"] >= limit:
            self._exhausted("max_restarts")

    def _exhausted(self, reason: str) -> None:
        logger.warning(f"Search budget exhausted ({reason})", extra=self._progress())
        raise SearchExhaustedError(
            f"No plan found: search budget exhausted ({reason})",
            reason=reason,
            iterations=self.stats["iterations"],
            restarts=self.stats["restarts"],
        )

    def _progress(self) -> Dict[str, Any]:
        return {
            "iterations": self.stats["iterations"],
            "restarts": self.stats["restarts"],
            "steps": self.stats["steps"],
        }

    def _heuristic_label(self, heuristic: Heuristic) -> str:
        if self.heuristic_name is not None:
            return self.heuristic_name.value
        return type(heuristic).__name__

    def get_capabilities(self) -> List[str]:
        """
        Return random walk planning capabilities.

        Returns:
            List of capability identifiers
        """
        return [
            "planning",
            "strips",
            "negative_preconditions",
            "forward_planning",
            "stochastic_local_search",
            "random_walk",
            "restarts",
        ]
