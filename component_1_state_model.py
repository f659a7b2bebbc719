"""
Component 1: State Model

Propositional world model for STRIPS-style planning:
- Facts (ground propositions)
- Immutable states (sets of facts)
- Conditions (positive and negative literals)
- Effects (add/delete lists)
- Ground actions (precondition + effect)

States are values: applying an action never touches the input state, it
returns a new one. The search engine relies on this to restart from the
problem's initial state without copying it.

Author: PRW Development Team
"""

from dataclasses import dataclass, field
from typing import AbstractSet, Any, FrozenSet, Iterable, Tuple, Union

Fact = Tuple[str, ...]


def format_fact(fact: Fact) -> str:
    """Render a fact the PDDL way: ("on", "A", "B") -> "(on A B)"."""
    return "(" + " ".join(fact) + ")"


def _freeze(facts: Iterable[Fact]) -> FrozenSet[Fact]:
    """Normalize an iterable of facts into a frozenset of string tuples."""
    frozen = set()
    for fact in facts:
        if isinstance(fact, str) or not isinstance(fact, (tuple, list)):
            raise TypeError(f"Fact must be a tuple of strings, got {fact!r}")
        frozen.add(tuple(str(part) for part in fact))
    return frozenset(frozen)


def _is_frozen(facts: Any) -> bool:
    """True if facts is already a frozenset of string tuples."""
    return isinstance(facts, frozenset) and all(
        type(fact) is tuple and all(type(part) is str for part in fact)
        for fact in facts
    )


# ============================================================================
# State Representation
# ============================================================================


@dataclass(frozen=True)
class State:
    """
    Represents a world state as an immutable set of propositions.

    Propositions are tuples: (predicate, *args)
    Example: ("on", "A", "B") means "Block A is on Block B"
    """

    propositions: FrozenSet[Fact] = field(default_factory=frozenset)

    def __post_init__(self):
        if not _is_frozen(self.propositions):
            object.__setattr__(self, "propositions", _freeze(self.propositions))

    def __contains__(self, fact: Fact) -> bool:
        return fact in self.propositions

    def __len__(self) -> int:
        return len(self.propositions)

    def satisfies(self, conditions: Union["Condition", Iterable[Fact]]) -> bool:
        """Check if state satisfies a Condition or a plain set of facts."""
        if isinstance(conditions, Condition):
            return conditions.is_satisfied_by(self)
        return all(fact in self.propositions for fact in conditions)

    def copy(self) -> "State":
        """Return an equal, independent state."""
        return State(propositions=self.propositions)

    def to_string(self) -> str:
        """Human-readable state description."""
        if not self.propositions:
            return "Empty State"
        props = sorted(format_fact(p) for p in self.propositions)
        return "\n".join(props)


# ============================================================================
# Conditions and Effects
# ============================================================================


@dataclass(frozen=True)
class Condition:
    """
    Conjunction of literals over facts.

    Attributes:
        positive: Facts that must hold
        negative: Facts that must not hold
    """

    positive: FrozenSet[Fact] = field(default_factory=frozenset)
    negative: FrozenSet[Fact] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, "positive", _freeze(self.positive))
        object.__setattr__(self, "negative", _freeze(self.negative))

    @classmethod
    def of(cls, facts: Iterable[Fact], negative: Iterable[Fact] = ()) -> "Condition":
        """Build a condition from positive (and optionally negative) facts."""
        return cls(positive=_freeze(facts), negative=_freeze(negative))

    def is_satisfied_by(self, state: State) -> bool:
        """True iff every positive fact holds and no negative fact holds."""
        props = state.propositions
        return self.positive <= props and self.negative.isdisjoint(props)

    def is_empty(self) -> bool:
        return not self.positive and not self.negative

    def facts(self) -> FrozenSet[Fact]:
        """All facts mentioned by this condition."""
        return self.positive | self.negative

    def __str__(self):
        literals = [format_fact(f) for f in sorted(self.positive)]
        literals += [f"(not {format_fact(f)})" for f in sorted(self.negative)]
        return "(and " + " ".join(literals) + ")" if literals else "(and)"


@dataclass(frozen=True)
class Effect:
    """
    Unconditional STRIPS effect.

    Attributes:
        add: Facts made true
        delete: Facts made false
    """

    add: FrozenSet[Fact] = field(default_factory=frozenset)
    delete: FrozenSet[Fact] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, "add", _freeze(self.add))
        object.__setattr__(self, "delete", _freeze(self.delete))

    def apply_to(self, state: State) -> State:
        """Return the successor state; add effects win over deletes."""
        return State(propositions=(state.propositions - self.delete) | self.add)

    def facts(self) -> FrozenSet[Fact]:
        return self.add | self.delete


# ============================================================================
# Action Model
# ============================================================================


@dataclass(frozen=True)
class Action:
    """
    Ground STRIPS action with a precondition and an effect.

    Attributes:
        name: Action identifier, e.g. "stack(A, B)"
        precondition: Condition that must hold before execution
        effect: Add/delete lists applied on execution
    """

    name: str
    precondition: Condition = field(default_factory=Condition)
    effect: Effect = field(default_factory=Effect)

    @classmethod
    def strips(
        cls,
        name: str,
        preconditions: Iterable[Fact] = (),
        add_effects: Iterable[Fact] = (),
        delete_effects: Iterable[Fact] = (),
        negative_preconditions: Iterable[Fact] = (),
    ) -> "Action":
        """Build an action from plain fact collections."""
        return cls(
            name=name,
            precondition=Condition.of(preconditions, negative_preconditions),
            effect=Effect(add=_freeze(add_effects), delete=_freeze(delete_effects)),
        )

    @property
    def preconditions(self) -> AbstractSet[Fact]:
        return self.precondition.positive

    @property
    def add_effects(self) -> AbstractSet[Fact]:
        return self.effect.add

    @property
    def delete_effects(self) -> AbstractSet[Fact]:
        return self.effect.delete

    def is_applicable(self, state: State) -> bool:
        """Check if action can be executed in given state."""
        return self.precondition.is_satisfied_by(state)

    def apply(self, state: State) -> State:
        """Apply action to state, returning new state."""
        if not self.is_applicable(state):
            raise ValueError(f"Action {self} not applicable in state")
        return self.effect.apply_to(state)

    def __str__(self):
        return self.name
