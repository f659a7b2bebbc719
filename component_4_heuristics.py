"""
Component 4: Planning Heuristics

Heuristic oracles consumed by the random walk planner:
- GoalCountHeuristic: Number of unsatisfied goal literals
- MaxHeuristic: h_max over the delete relaxation
- SumHeuristic: h_add over the delete relaxation
- FastForwardHeuristic: Size of a relaxed plan (FF)
- CachedHeuristic: LRU memoization wrapper for any oracle

The planner only uses estimates to detect progress, so none of these needs
to be admissible. Every oracle returns 0 exactly when the goal holds.

Author: PRW Development Team
"""

from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Union

from cachetools import LRUCache

from common.constants import HEURISTIC_CACHE_MAXSIZE, HEURISTIC_UNREACHABLE
from component_1_state_model import Action, Condition, Fact, State
from component_15_logging_config import get_logger
from prw_exceptions import InvalidConfigError

logger = get_logger(__name__)

GoalLike = Union[Condition, Iterable[Fact]]


def _as_condition(goal: GoalLike) -> Condition:
    return goal if isinstance(goal, Condition) else Condition.of(goal)


# ============================================================================
# Heuristic Names
# ============================================================================


class HeuristicName(Enum):
    """Selector names accepted on the command line."""

    MAX = "MAX"
    SUM = "SUM"
    FAST_FORWARD = "FAST_FORWARD"
    SET_LEVEL = "SET_LEVEL"
    SUM_MUTEX = "SUM_MUTEX"
    COMBO = "COMBO"
    AJUSTED_SUM = "AJUSTED_SUM"
    AJUSTED_SUM2 = "AJUSTED_SUM2"
    AJUSTED_SUM2M = "AJUSTED_SUM2M"
    GOAL_COUNT = "GOAL_COUNT"

    @classmethod
    def parse(cls, name: Union[str, "HeuristicName"]) -> "HeuristicName":
        """Case-insensitive lookup; raises InvalidConfigError if unknown."""
        if isinstance(name, HeuristicName):
            return name
        key = str(name).strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            raise InvalidConfigError(
                f"Unknown heuristic {name!r}. Known: {', '.join(m.value for m in cls)}",
                parameter="heuristic",
            ) from None


# ============================================================================
# Heuristics
# ============================================================================


class Heuristic:
    """Base class for planning heuristics."""

    def estimate(self, state: State, goal: GoalLike) -> int:
        """Estimate distance from state to goal (integer >= 0)."""
        raise NotImplementedError


class GoalCountHeuristic(Heuristic):
    """Counts goal literals not satisfied in the state."""

    def estimate(self, state: State, goal: GoalLike) -> int:
        condition = _as_condition(goal)
        unsatisfied = condition.positive - state.propositions
        violated = condition.negative & state.propositions
        return len(unsatisfied) + len(violated)


class RelaxedHeuristic(Heuristic):
    """
    Shared machinery for heuristics based on the delete relaxation.

    Delete effects and negative preconditions are ignored. Fact costs are
    propagated to a fixpoint with unit action costs; subclasses choose how
    precondition and goal costs are aggregated.
    """

    def __init__(self, actions: Iterable[Action]):
        self.actions: Tuple[Action, ...] = tuple(actions)

    def _aggregate(self, costs: Iterable[int]) -> int:
        raise NotImplementedError

    def _fact_costs(
        self, state: State
    ) -> Tuple[Dict[Fact, int], Dict[Fact, Action]]:
        costs: Dict[Fact, int] = {fact: 0 for fact in state.propositions}
        supporters: Dict[Fact, Action] = {}

        changed = True
        while changed:
            changed = False
            for action in self.actions:
                pre = action.precondition.positive
                if not all(p in costs for p in pre):
                    continue
                cost = self._aggregate(costs[p] for p in pre) + 1
                for fact in action.effect.add:
                    if cost < costs.get(fact, HEURISTIC_UNREACHABLE):
                        costs[fact] = cost
                        supporters[fact] = action
                        changed = True

        return costs, supporters

    def estimate(self, state: State, goal: GoalLike) -> int:
        condition = _as_condition(goal)
        if condition.is_satisfied_by(state):
            return 0

        costs, supporters = self._fact_costs(state)
        if not all(g in costs for g in condition.positive):
            return HEURISTIC_UNREACHABLE

        value = self._goal_value(state, condition, costs, supporters)
        # Goal not satisfied (only negative literals violated): never report 0
        return max(1, value)

    def _goal_value(
        self,
        state: State,
        goal: Condition,
        costs: Dict[Fact, int],
        supporters: Dict[Fact, Action],
    ) -> int:
        return self._aggregate(costs[g] for g in goal.positive)


class MaxHeuristic(RelaxedHeuristic):
    """h_max: cost of the most expensive goal fact."""

    def _aggregate(self, costs: Iterable[int]) -> int:
        return max(costs, default=0)


class SumHeuristic(RelaxedHeuristic):
    """h_add: sum of goal fact costs, assuming independence."""

    def _aggregate(self, costs: Iterable[int]) -> int:
        return sum(costs)


class FastForwardHeuristic(SumHeuristic):
    """
    FF heuristic: number of actions in a relaxed plan.

    The relaxed plan is extracted backwards from the goal following the
    h_add best supporter of each fact.
    """

    def _goal_value(
        self,
        state: State,
        goal: Condition,
        costs: Dict[Fact, int],
        supporters: Dict[Fact, Action],
    ) -> int:
        relaxed_plan = set()
        open_facts: List[Fact] = [g for g in goal.positive if g not in state]
        seen = set(open_facts)

        while open_facts:
            fact = open_facts.pop()
            action = supporters[fact]
            if action in relaxed_plan:
                continue
            relaxed_plan.add(action)
            for pre in action.precondition.positive:
                if pre not in state and pre not in seen:
                    seen.add(pre)
                    open_facts.append(pre)

        return len(relaxed_plan)


class CachedHeuristic(Heuristic):
    """
    Memoizes another heuristic per (state, goal) in a bounded LRU cache.

    States and conditions are immutable and hashable, so they are used as
    cache keys directly.
    """

    def __init__(self, inner: Heuristic, maxsize: int = HEURISTIC_CACHE_MAXSIZE):
        if maxsize <= 0:
            raise InvalidConfigError(
                f"Cache size must be positive, got {maxsize}",
                parameter="heuristic_cache_size",
            )
        self.inner = inner
        self._cache: LRUCache = LRUCache(maxsize=maxsize)
        self.hits = 0
        self.misses = 0

    def estimate(self, state: State, goal: GoalLike) -> int:
        key = (state, _as_condition(goal))
        if key in self._cache:
            self.hits += 1
            return self._cache[key]

        self.misses += 1
        value = self.inner.estimate(state, goal)
        self._cache[key] = value
        return value

    def get_stats(self) -> Dict[str, float]:
        total = self.hits + self.misses
        return {
            "hits": self.hits,
            "misses": self.misses,
            "size": len(self._cache),
            "hit_rate": self.hits / total if total else 0.0,
        }

    def clear(self) -> None:
        self._cache.clear()
        self.hits = 0
        self.misses = 0


# ============================================================================
# Factory
# ============================================================================

_RELAXED_HEURISTICS = {
    HeuristicName.MAX: MaxHeuristic,
    HeuristicName.SUM: SumHeuristic,
    HeuristicName.FAST_FORWARD: FastForwardHeuristic,
}

AVAILABLE_HEURISTICS: Tuple[HeuristicName, ...] = (
    HeuristicName.GOAL_COUNT,
    *_RELAXED_HEURISTICS,
)


def get_heuristic(
    name: Union[str, HeuristicName],
    actions: Iterable[Action] = (),
    cache_size: Optional[int] = HEURISTIC_CACHE_MAXSIZE,
) -> Heuristic:
    """
    Create the heuristic oracle registered under name.

    Args:
        name: HeuristicName or its string form
        actions: Ground actions of the problem (needed by relaxed heuristics)
        cache_size: LRU size for CachedHeuristic; 0 or None disables caching

    Raises:
        InvalidConfigError: If the name is unknown or not available
    """
    heuristic_name = HeuristicName.parse(name)

    if heuristic_name is HeuristicName.GOAL_COUNT:
        heuristic: Heuristic = GoalCountHeuristic()
    elif heuristic_name in _RELAXED_HEURISTICS:
        heuristic = _RELAXED_HEURISTICS[heuristic_name](actions)
    else:
        raise InvalidConfigError(
            f"Heuristic {heuristic_name.value} is not available. Available: "
            f"{', '.join(h.value for h in AVAILABLE_HEURISTICS)}",
            parameter="heuristic",
        )

    logger.debug(
        "Heuristic created",
        extra={"heuristic": heuristic_name.value, "cache_size": cache_size or 0},
    )

    if cache_size:
        return CachedHeuristic(heuristic, maxsize=cache_size)
    return heuristic
