"""
Component 3: Planning Problem

Ground problem descriptor consumed by the search engine:
- Requirement keywords (PDDL 3.1) and the unsupported subset
- Initial state, goal condition and ground action set

Author: PRW Development Team
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, List, Tuple, Union

from component_1_state_model import Action, Condition, Fact, State
from prw_exceptions import ProblemDefinitionError

# ============================================================================
# Requirements
# ============================================================================


class RequirementKey(Enum):
    """PDDL requirement keywords."""

    STRIPS = ":strips"
    TYPING = ":typing"
    NEGATIVE_PRECONDITIONS = ":negative-preconditions"
    DISJUNCTIVE_PRECONDITIONS = ":disjunctive-preconditions"
    EQUALITY = ":equality"
    EXISTENTIAL_PRECONDITIONS = ":existential-preconditions"
    UNIVERSAL_PRECONDITIONS = ":universal-preconditions"
    QUANTIFIED_PRECONDITIONS = ":quantified-preconditions"
    CONDITIONAL_EFFECTS = ":conditional-effects"
    FLUENTS = ":fluents"
    NUMERIC_FLUENTS = ":numeric-fluents"
    OBJECT_FLUENTS = ":object-fluents"
    ADL = ":adl"
    DURATIVE_ACTIONS = ":durative-actions"
    DURATION_INEQUALITIES = ":duration-inequalities"
    CONTINUOUS_EFFECTS = ":continuous-effects"
    DERIVED_PREDICATES = ":derived-predicates"
    TIMED_INITIAL_LITERALS = ":timed-initial-literals"
    PREFERENCES = ":preferences"
    CONSTRAINTS = ":constraints"
    ACTION_COSTS = ":action-costs"
    GOAL_UTILITIES = ":goal-utilities"
    HIERARCHY = ":hierarchy"
    METHOD_CONSTRAINTS = ":method-constraints"

    @classmethod
    def from_keyword(cls, keyword: Union[str, "RequirementKey"]) -> "RequirementKey":
        """
        Parse a requirement keyword.

        Accepts ":numeric-fluents", "numeric-fluents", "NUMERIC_FLUENTS"
        or a RequirementKey (case-insensitive).

        Raises:
            ProblemDefinitionError: If the keyword is unknown
        """
        if isinstance(keyword, RequirementKey):
            return keyword
        text = str(keyword).strip().lower()
        if not text.startswith(":"):
            text = ":" + text.replace("_", "-")
        for member in cls:
            if member.value == text:
                return member
        raise ProblemDefinitionError(
            f"Unknown requirement keyword {keyword!r}",
            context={"keyword": keyword},
        )


UNSUPPORTED_REQUIREMENTS: FrozenSet[RequirementKey] = frozenset(
    {
        RequirementKey.ACTION_COSTS,
        RequirementKey.CONSTRAINTS,
        RequirementKey.CONTINUOUS_EFFECTS,
        RequirementKey.DERIVED_PREDICATES,
        RequirementKey.DURATIVE_ACTIONS,
        RequirementKey.DURATION_INEQUALITIES,
        RequirementKey.FLUENTS,
        RequirementKey.GOAL_UTILITIES,
        RequirementKey.METHOD_CONSTRAINTS,
        RequirementKey.NUMERIC_FLUENTS,
        RequirementKey.OBJECT_FLUENTS,
        RequirementKey.PREFERENCES,
        RequirementKey.TIMED_INITIAL_LITERALS,
        RequirementKey.HIERARCHY,
    }
)
"""Requirements that disqualify a problem; any single one is enough."""


# ============================================================================
# Planning Problem
# ============================================================================


@dataclass
class PlanningProblem:
    """
    Defines a ground planning problem instance.

    Attributes:
        initial_state: Starting state (never mutated, states are immutable)
        goal: Goal condition; a plain fact set is promoted to a Condition
        actions: Ground actions, order preserved
        requirements: Declared requirement keywords
        name: Problem identifier used in logs
    """

    initial_state: State
    goal: Condition
    actions: Tuple[Action, ...]
    requirements: FrozenSet[RequirementKey] = field(
        default_factory=lambda: frozenset({RequirementKey.STRIPS})
    )
    name: str = "problem"

    def __post_init__(self):
        if not isinstance(self.initial_state, State):
            self.initial_state = State(propositions=self.initial_state)
        if not isinstance(self.goal, Condition):
            self.goal = Condition.of(self.goal)
        self.actions = tuple(self.actions)
        self.requirements = frozenset(
            RequirementKey.from_keyword(r) for r in self.requirements
        )

        seen = set()
        for action in self.actions:
            if not isinstance(action, Action):
                raise ProblemDefinitionError(
                    f"Expected Action, got {type(action).__name__}",
                    source=self.name,
                )
            if action.name in seen:
                raise ProblemDefinitionError(
                    f"Duplicate action name {action.name!r}", source=self.name
                )
            seen.add(action.name)

    def is_goal(self, state: State) -> bool:
        """Check if state satisfies goal conditions."""
        return self.goal.is_satisfied_by(state)

    def get_applicable_actions(self, state: State) -> List[Action]:
        """Get all actions whose precondition holds in state."""
        return [action for action in self.actions if action.is_applicable(state)]

    def unsupported_requirements(
        self, unsupported: Iterable[RequirementKey] = UNSUPPORTED_REQUIREMENTS
    ) -> FrozenSet[RequirementKey]:
        """Declared requirements that fall in the unsupported set."""
        return self.requirements & frozenset(unsupported)

    def facts(self) -> FrozenSet[Fact]:
        """Every fact mentioned by the initial state, the goal or an action."""
        facts = set(self.initial_state.propositions) | self.goal.facts()
        for action in self.actions:
            facts |= action.precondition.facts()
            facts |= action.effect.facts()
        return frozenset(facts)

    def __str__(self):
        return (
            f"PlanningProblem({self.name}: {len(self.initial_state)} initial facts, "
            f"{len(self.actions)} actions)"
        )
