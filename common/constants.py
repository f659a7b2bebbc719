"""
Centralized constants for the PRW (Pure Random Walk) planner.

This module provides a single source of truth for the magic numbers and
default values used throughout the planner. Centralizing them keeps tuning
in one place and documents where each value is consumed.

Organization:
    - Search Control: restart policy of the random walk
    - Heuristics: default oracle, weight and sentinel values
    - Cache Configuration: heuristic memoization limits
    - Command Line: exit codes

Usage:
    from common.constants import MAX_STEPS, DEFAULT_HEURISTIC

Note:
    These constants define default values. PlannerConfig (prw_config.py) and
    RandomWalkPlanner constructor parameters override them per run.
"""

# =============================================================================
# Search Control
# =============================================================================

MAX_STEPS: int = 1000
"""
Stagnation limit before the random walk restarts from the initial state.

The stagnation counter is reset whenever a step reaches a new heuristic
minimum. A restart happens on the first iteration where the counter
exceeds this value (counter > MAX_STEPS), or immediately at a dead end.

Used by:
    - component_5_random_walk_planner.py: plateau restart test
    - prw_config.py: PlannerConfig.max_steps default
"""

# =============================================================================
# Heuristics
# =============================================================================

DEFAULT_HEURISTIC: str = "FAST_FORWARD"
"""
Name of the heuristic oracle used when none is configured.

Must be a member name of component_4_heuristics.HeuristicName.
"""

DEFAULT_HEURISTIC_WEIGHT: float = 1.0
"""
Weight applied to the heuristic estimate.

Stored and reported for compatibility with weighted planners; the random
walk only compares raw estimates against the best seen so far.
"""

HEURISTIC_UNREACHABLE: int = 2**31 - 1
"""
Estimate returned when the delete relaxation proves the goal unreachable.

Any real estimate is strictly lower, so a walk that leaves such a state
registers as progress.
"""

# =============================================================================
# Cache Configuration
# =============================================================================

HEURISTIC_CACHE_MAXSIZE: int = 10000
"""
Maximum number of (state, goal) entries memoized by CachedHeuristic.

Random walks revisit the same states often on small problems; on larger
ones the LRU policy keeps memory bounded. Set to 0 in PlannerConfig to
disable caching entirely.

Used by:
    - component_4_heuristics.py: CachedHeuristic default size
    - prw_config.py: PlannerConfig.heuristic_cache_size default
"""

# =============================================================================
# Command Line
# =============================================================================

EXIT_OK: int = 0
EXIT_FAILURE: int = 1
EXIT_SEARCH_EXHAUSTED: int = 3
