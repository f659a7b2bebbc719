"""
Component 2: Sequential Plan

Ordered, mutable sequence of ground actions. The search engine appends one
action per random-walk step and clears the plan wholesale on restart; on
success the plan is handed over to the caller.

Author: PRW Development Team
"""

from typing import Iterable, Iterator, List, Optional, Tuple, overload

from component_1_state_model import Action, State


class SequentialPlan:
    """
    Totally ordered plan.

    Single-threaded owner only; no concurrent mutation is supported.
    Iteration walks a snapshot, so iterating twice yields the same
    actions and mutating during iteration is safe.
    """

    def __init__(self, actions: Optional[Iterable[Action]] = None):
        self._actions: List[Action] = list(actions) if actions else []

    def append(self, action: Action) -> None:
        """Append an action at the end of the plan (amortized O(1))."""
        self._actions.append(action)

    def add(self, index: int, action: Action) -> None:
        """Insert an action at a given position."""
        if not 0 <= index <= len(self._actions):
            raise IndexError(f"Plan index {index} out of range 0..{len(self._actions)}")
        self._actions.insert(index, action)

    def clear(self) -> None:
        """Remove every action."""
        self._actions.clear()

    def size(self) -> int:
        return len(self._actions)

    def is_empty(self) -> bool:
        return not self._actions

    def actions(self) -> Tuple[Action, ...]:
        """Immutable snapshot of the plan."""
        return tuple(self._actions)

    def execute(self, state: State) -> State:
        """
        Apply every action in order, starting from state.

        Raises:
            ValueError: If an action is not applicable when reached
        """
        for action in self._actions:
            state = action.apply(state)
        return state

    def __len__(self) -> int:
        return len(self._actions)

    def __iter__(self) -> Iterator[Action]:
        return iter(tuple(self._actions))

    @overload
    def __getitem__(self, index: int) -> Action: ...

    @overload
    def __getitem__(self, index: slice) -> List[Action]: ...

    def __getitem__(self, index):
        return self._actions[index]

    def __eq__(self, other):
        if not isinstance(other, SequentialPlan):
            return NotImplemented
        return self._actions == other._actions

    def __repr__(self):
        return f"SequentialPlan({[a.name for a in self._actions]!r})"

    def to_string(self) -> str:
        """Numbered, one action per line."""
        if not self._actions:
            return "Empty Plan"
        width = len(str(len(self._actions) - 1))
        return "\n".join(
            f"{i:0{width}d}: {action.name}"
            for i, action in enumerate(self._actions)
        )
