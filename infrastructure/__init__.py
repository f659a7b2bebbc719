"""
infrastructure package

Shared infrastructure for the PRW planner.

Modules:
    - interfaces: Base interface for planners
"""

from infrastructure.interfaces import BasePlanner

__all__ = [
    "BasePlanner",
]
