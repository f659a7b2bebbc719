"""
tests/test_heuristics.py

Tests for the heuristic oracles (component_4).
"""

import pytest

from common.constants import HEURISTIC_UNREACHABLE
from component_1_state_model import Action, Condition, State
from component_4_heuristics import (
    AVAILABLE_HEURISTICS,
    CachedHeuristic,
    FastForwardHeuristic,
    GoalCountHeuristic,
    HeuristicName,
    MaxHeuristic,
    SumHeuristic,
    get_heuristic,
)
from component_7_domain_builders import ChainBuilder
from prw_exceptions import InvalidConfigError


@pytest.fixture
def fork_actions():
    """a: {} -> p, b: p -> x, c: p -> y."""
    return [
        Action.strips("a", add_effects={("p",)}),
        Action.strips("b", preconditions={("p",)}, add_effects={("x",)}),
        Action.strips("c", preconditions={("p",)}, add_effects={("y",)}),
    ]


class TestHeuristicName:
    """Name parsing."""

    @pytest.mark.parametrize(
        "raw", ["FAST_FORWARD", "fast_forward", "fast-forward", " Fast_Forward "]
    )
    def test_parse_variants(self, raw):
        """Test: Case-insensitive, dashes accepted."""
        assert HeuristicName.parse(raw) is HeuristicName.FAST_FORWARD

    def test_parse_member(self):
        """Test: Members pass through."""
        assert HeuristicName.parse(HeuristicName.SUM) is HeuristicName.SUM

    def test_parse_unknown(self):
        """Test: Unknown names raise InvalidConfigError."""
        with pytest.raises(InvalidConfigError) as exc_info:
            HeuristicName.parse("BOGUS")

        assert exc_info.value.context["parameter"] == "heuristic"


class TestGoalCount:
    """GoalCountHeuristic."""

    def test_counts_missing_and_violated(self):
        """Test: Missing positive facts plus true negative facts."""
        goal = Condition.of({("a",), ("b",)}, negative={("c",)})
        state = State(propositions={("a",), ("c",)})

        assert GoalCountHeuristic().estimate(state, goal) == 2

    def test_zero_at_goal(self):
        """Test: Satisfied goal gives 0."""
        state = State(propositions={("a",)})
        assert GoalCountHeuristic().estimate(state, {("a",)}) == 0


class TestRelaxedHeuristics:
    """h_max, h_add and FF on hand-computed examples."""

    def test_chain_values(self):
        """Test: Chain of length 3 costs 3 under every relaxed heuristic."""
        problem = ChainBuilder.create_problem(3)
        state = problem.initial_state

        assert MaxHeuristic(problem.actions).estimate(state, problem.goal) == 3
        assert SumHeuristic(problem.actions).estimate(state, problem.goal) == 3
        assert FastForwardHeuristic(problem.actions).estimate(state, problem.goal) == 3

    def test_fork_values(self, fork_actions):
        """Test: Shared precondition is counted twice by h_add, once by FF."""
        goal = {("x",), ("y",)}
        state = State()

        assert MaxHeuristic(fork_actions).estimate(state, goal) == 2
        assert SumHeuristic(fork_actions).estimate(state, goal) == 4
        assert FastForwardHeuristic(fork_actions).estimate(state, goal) == 3

    def test_partial_progress(self, fork_actions):
        """Test: Facts already true cost nothing."""
        state = State(propositions={("p",), ("x",)})

        assert FastForwardHeuristic(fork_actions).estimate(state, {("x",), ("y",)}) == 1

    @pytest.mark.parametrize("cls", [MaxHeuristic, SumHeuristic, FastForwardHeuristic])
    def test_zero_at_goal(self, cls, fork_actions):
        """Test: Exactly 0 when the goal holds."""
        state = State(propositions={("x",)})
        assert cls(fork_actions).estimate(state, {("x",)}) == 0

    @pytest.mark.parametrize("cls", [MaxHeuristic, SumHeuristic, FastForwardHeuristic])
    def test_unreachable(self, cls, fork_actions):
        """Test: Goal outside the relaxed reachability gives HEURISTIC_UNREACHABLE."""
        assert cls(fork_actions).estimate(State(), {("z",)}) == HEURISTIC_UNREACHABLE

    @pytest.mark.parametrize("cls", [MaxHeuristic, SumHeuristic, FastForwardHeuristic])
    def test_violated_negative_goal_is_positive(self, cls):
        """Test: Goal with only a violated negative literal never reports 0."""
        goal = Condition.of((), negative={("lit",)})
        state = State(propositions={("lit",)})

        assert cls([]).estimate(state, goal) == 1

    def test_deletes_ignored(self):
        """Test: Delete effects do not make facts unreachable in the relaxation."""
        actions = [
            Action.strips(
                "swap", preconditions={("a",)}, add_effects={("b",)}, delete_effects={("a",)}
            ),
            Action.strips("need_both", preconditions={("a",), ("b",)}, add_effects={("g",)}),
        ]

        state = State(propositions={("a",)})
        assert MaxHeuristic(actions).estimate(state, {("g",)}) == 2


class TestCachedHeuristic:
    """LRU memoization."""

    def test_hits_and_misses(self):
        """Test: Second estimate for the same state is a hit."""
        cached = CachedHeuristic(GoalCountHeuristic(), maxsize=4)
        state = State(propositions={("a",)})
        goal = Condition.of({("b",)})

        assert cached.estimate(state, goal) == 1
        assert cached.estimate(State(propositions=[("a",)]), goal) == 1

        stats = cached.get_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["size"] == 1
        assert stats["hit_rate"] == 0.5

    def test_lru_eviction(self):
        """Test: Cache never grows beyond maxsize."""
        cached = CachedHeuristic(GoalCountHeuristic(), maxsize=2)
        goal = Condition.of({("g",)})

        for i in range(5):
            cached.estimate(State(propositions={(f"s{i}",)}), goal)

        assert cached.get_stats()["size"] == 2

    def test_clear(self):
        """Test: clear() drops entries and counters."""
        cached = CachedHeuristic(GoalCountHeuristic(), maxsize=2)
        cached.estimate(State(), {("g",)})

        cached.clear()

        assert cached.get_stats() == {"hits": 0, "misses": 0, "size": 0, "hit_rate": 0.0}

    def test_non_positive_size_rejected(self):
        """Test: maxsize must be positive."""
        with pytest.raises(InvalidConfigError):
            CachedHeuristic(GoalCountHeuristic(), maxsize=0)


class TestFactory:
    """get_heuristic()."""

    def test_available_set(self):
        """Test: Four heuristics are implemented."""
        assert set(AVAILABLE_HEURISTICS) == {
            HeuristicName.GOAL_COUNT,
            HeuristicName.MAX,
            HeuristicName.SUM,
            HeuristicName.FAST_FORWARD,
        }

    def test_creates_cached_by_default(self, fork_actions):
        """Test: Default factory output is cached."""
        heuristic = get_heuristic("MAX", fork_actions)

        assert isinstance(heuristic, CachedHeuristic)
        assert isinstance(heuristic.inner, MaxHeuristic)

    def test_uncached(self):
        """Test: cache_size=None returns the bare oracle."""
        heuristic = get_heuristic("goal_count", cache_size=None)
        assert isinstance(heuristic, GoalCountHeuristic)

    @pytest.mark.parametrize(
        "name", ["SET_LEVEL", "SUM_MUTEX", "COMBO", "AJUSTED_SUM", "AJUSTED_SUM2", "AJUSTED_SUM2M"]
    )
    def test_unavailable(self, name):
        """Test: Known but unimplemented names raise InvalidConfigError."""
        with pytest.raises(InvalidConfigError):
            get_heuristic(name)
