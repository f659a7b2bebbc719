"""
Component 7: Domain Builders

Programmatic builders for ground planning problems:
- ChainBuilder: Linear chain f0 -> f1 -> ... -> fN
- BlocksWorldBuilder: Classic blocks world (pickup, putdown, stack, unstack)
- GridNavigationBuilder: Grid pathfinding with obstacles

Builders emit ground actions directly; no lifted operators are involved.

Author: PRW Development Team
"""

from itertools import permutations
from typing import Dict, List, Optional, Sequence, Tuple

from component_1_state_model import Action, Fact, State
from component_3_planning_problem import PlanningProblem, RequirementKey

# ============================================================================
# Chain
# ============================================================================


class ChainBuilder:
    """
    Builder for a linear chain of facts.

    Action step_i requires f_i and adds f_{i+1}. With length=2 this is the
    smallest interesting problem: init {f0}, goal {f2}, plan [step_0, step_1].
    """

    @staticmethod
    def fact(i: int) -> Fact:
        return (f"f{i}",)

    @staticmethod
    def create_actions(length: int) -> List[Action]:
        return [
            Action.strips(
                name=f"step_{i}",
                preconditions={ChainBuilder.fact(i)},
                add_effects={ChainBuilder.fact(i + 1)},
            )
            for i in range(length)
        ]

    @staticmethod
    def create_problem(length: int, goal_fact: Optional[Fact] = None) -> PlanningProblem:
        """
        Create chain problem instance.

        Args:
            length: Number of actions in the chain
            goal_fact: Goal fact (default: the last fact of the chain)
        """
        if length < 0:
            raise ValueError(f"length must be >= 0, got {length}")
        goal = goal_fact if goal_fact is not None else ChainBuilder.fact(length)
        return PlanningProblem(
            initial_state=State(propositions={ChainBuilder.fact(0)}),
            goal={goal},
            actions=ChainBuilder.create_actions(length),
            name=f"chain-{length}",
        )


# ============================================================================
# Blocks World
# ============================================================================


class BlocksWorldBuilder:
    """
    Builder for classic Blocks World domain.

    Actions: stack, unstack, pickup, putdown (ground over the given blocks)
    Goal: Achieve specific block configuration
    """

    @staticmethod
    def create_actions(blocks: Sequence[str]) -> List[Action]:
        """Create ground Blocks World actions."""
        actions = []

        for x in blocks:
            # Pickup(x): Pick up block x from table
            actions.append(
                Action.strips(
                    name=f"pickup({x})",
                    preconditions={("ontable", x), ("clear", x), ("handempty",)},
                    add_effects={("holding", x)},
                    delete_effects={("ontable", x), ("clear", x), ("handempty",)},
                )
            )

            # Putdown(x): Put block x on table
            actions.append(
                Action.strips(
                    name=f"putdown({x})",
                    preconditions={("holding", x)},
                    add_effects={("ontable", x), ("clear", x), ("handempty",)},
                    delete_effects={("holding", x)},
                )
            )

        for x, y in permutations(blocks, 2):
            # Stack(x, y): Put block x on block y
            actions.append(
                Action.strips(
                    name=f"stack({x}, {y})",
                    preconditions={("holding", x), ("clear", y)},
                    add_effects={("on", x, y), ("clear", x), ("handempty",)},
                    delete_effects={("holding", x), ("clear", y)},
                )
            )

            # Unstack(x, y): Remove block x from block y
            actions.append(
                Action.strips(
                    name=f"unstack({x}, {y})",
                    preconditions={("on", x, y), ("clear", x), ("handempty",)},
                    add_effects={("holding", x), ("clear", y)},
                    delete_effects={("on", x, y), ("clear", x), ("handempty",)},
                )
            )

        return actions

    @staticmethod
    def create_problem(
        blocks: List[str], initial_config: Dict[str, str], goal_config: Dict[str, str]
    ) -> PlanningProblem:
        """
        Create Blocks World problem instance.

        Args:
            blocks: List of block names
            initial_config: Initial block positions {"A": "table", "B": "A"}
            goal_config: Goal block positions

        Returns:
            PlanningProblem instance
        """
        initial_props = {("handempty",)}

        for block in blocks:
            location = initial_config.get(block, "table")

            if location == "table":
                initial_props.add(("ontable", block))
            else:
                initial_props.add(("on", block, location))

            # Block is clear if no other block is on it
            if not any(initial_config.get(b) == block for b in blocks):
                initial_props.add(("clear", block))

        goal_props = set()
        for block, location in goal_config.items():
            if location == "table":
                goal_props.add(("ontable", block))
            else:
                goal_props.add(("on", block, location))

        return PlanningProblem(
            initial_state=State(propositions=initial_props),
            goal=goal_props,
            actions=BlocksWorldBuilder.create_actions(blocks),
            name=f"blocks-{len(blocks)}",
        )


# ============================================================================
# Grid Navigation
# ============================================================================


class GridNavigationBuilder:
    """
    Builder for grid navigation domain.

    Actions: move_up, move_down, move_left, move_right per cell
    Goal: Reach target position while avoiding obstacles
    """

    MOVES: Dict[str, Tuple[int, int]] = {
        "up": (0, 1),
        "down": (0, -1),
        "right": (1, 0),
        "left": (-1, 0),
    }

    @staticmethod
    def at(x: int, y: int) -> Fact:
        return ("at", str(x), str(y))

    @staticmethod
    def create_actions(
        grid_size: Tuple[int, int], obstacles: Sequence[Tuple[int, int]] = ()
    ) -> List[Action]:
        """Create ground moves that stay on the grid and never enter obstacles."""
        max_x, max_y = grid_size
        blocked = set(obstacles)
        actions = []

        for direction, (dx, dy) in GridNavigationBuilder.MOVES.items():
            for x in range(max_x):
                for y in range(max_y):
                    nx, ny = x + dx, y + dy
                    if not (0 <= nx < max_x and 0 <= ny < max_y):
                        continue
                    if (x, y) in blocked or (nx, ny) in blocked:
                        continue
                    actions.append(
                        Action.strips(
                            name=f"move_{direction}_{x}_{y}",
                            preconditions={GridNavigationBuilder.at(x, y)},
                            add_effects={GridNavigationBuilder.at(nx, ny)},
                            delete_effects={GridNavigationBuilder.at(x, y)},
                        )
                    )

        return actions

    @staticmethod
    def create_problem(
        grid_size: Tuple[int, int],
        start: Tuple[int, int],
        goal: Tuple[int, int],
        obstacles: Optional[List[Tuple[int, int]]] = None,
    ) -> PlanningProblem:
        """
        Create grid navigation problem.

        Args:
            grid_size: (width, height)
            start: Starting position (x, y)
            goal: Goal position (x, y)
            obstacles: List of obstacle positions

        Returns:
            PlanningProblem instance
        """
        obstacles = obstacles or []
        if start in obstacles:
            raise ValueError(f"Start position {start} is an obstacle")

        return PlanningProblem(
            initial_state=State(propositions={GridNavigationBuilder.at(*start)}),
            goal={GridNavigationBuilder.at(*goal)},
            actions=GridNavigationBuilder.create_actions(grid_size, obstacles),
            requirements=frozenset({RequirementKey.STRIPS}),
            name=f"grid-{grid_size[0]}x{grid_size[1]}",
        )
