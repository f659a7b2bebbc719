"""
tests/test_plan.py

Tests for SequentialPlan (component_2).
"""

import pytest

from component_1_state_model import Action, State
from component_2_plan import SequentialPlan


@pytest.fixture
def actions():
    return [
        Action.strips("step_0", preconditions={("f0",)}, add_effects={("f1",)}),
        Action.strips("step_1", preconditions={("f1",)}, add_effects={("f2",)}),
    ]


class TestSequentialPlan:
    """Basic plan operations."""

    def test_empty(self):
        """Test: New plan is empty."""
        plan = SequentialPlan()

        assert plan.is_empty()
        assert plan.size() == 0
        assert plan.to_string() == "Empty Plan"

    def test_append_keeps_order(self, actions):
        """Test: Actions come back in insertion order."""
        plan = SequentialPlan()
        for action in actions:
            plan.append(action)

        assert [a.name for a in plan] == ["step_0", "step_1"]
        assert plan.actions() == tuple(actions)
        assert len(plan) == 2

    def test_add_at_index(self, actions):
        """Test: add() inserts; out of range raises IndexError."""
        plan = SequentialPlan([actions[1]])
        plan.add(0, actions[0])

        assert plan[0] is actions[0]
        with pytest.raises(IndexError):
            plan.add(5, actions[0])

    def test_clear(self, actions):
        """Test: clear() empties the plan."""
        plan = SequentialPlan(actions)
        plan.clear()
        assert plan.is_empty()

    def test_iteration_is_snapshot(self, actions):
        """Test: Mutating during iteration does not affect the iterator."""
        plan = SequentialPlan(actions)

        seen = []
        for action in plan:
            seen.append(action)
            plan.clear()

        assert seen == actions

    def test_execute(self, actions):
        """Test: Executing from init reaches f2."""
        plan = SequentialPlan(actions)
        final = plan.execute(State(propositions={("f0",)}))

        assert ("f2",) in final

    def test_execute_not_applicable(self, actions):
        """Test: Wrong order raises ValueError."""
        plan = SequentialPlan(reversed(actions))

        with pytest.raises(ValueError):
            plan.execute(State(propositions={("f0",)}))

    def test_equality_and_repr(self, actions):
        """Test: Plans compare by action sequence."""
        assert SequentialPlan(actions) == SequentialPlan(list(actions))
        assert SequentialPlan(actions) != SequentialPlan(actions[:1])
        assert repr(SequentialPlan(actions[:1])) == "SequentialPlan(['step_0'])"

    def test_to_string_padding(self):
        """Test: Indices are zero-padded to the widest index."""
        plan = SequentialPlan(Action.strips(f"a{i}") for i in range(11))
        lines = plan.to_string().splitlines()

        assert lines[0] == "00: a0"
        assert lines[-1] == "10: a10"
