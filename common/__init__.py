"""
Common constants for the PRW planner.

This package provides centralized default values shared by the search
engine, the heuristics, the configuration layer and the command line.
"""

from common.constants import *

__all__ = [
    # Search Control
    "MAX_STEPS",
    # Heuristics
    "DEFAULT_HEURISTIC",
    "DEFAULT_HEURISTIC_WEIGHT",
    "HEURISTIC_UNREACHABLE",
    # Cache Configuration
    "HEURISTIC_CACHE_MAXSIZE",
    # Command Line
    "EXIT_OK",
    "EXIT_FAILURE",
    "EXIT_SEARCH_EXHAUSTED",
]
