"""
prw_exceptions.py

Central exception hierarchy for the PRW planner.
Defines specialized exception classes for the different failure scenarios.

Exception hierarchy:
    PRWException (base)
    ├── PlanningException
    │   ├── UnsupportedProblemError
    │   ├── SearchExhaustedError
    │   │   └── SearchCancelledError
    │   └── ProblemDefinitionError
    └── ConfigurationException
        └── InvalidConfigError

Note: a state without applicable actions is NOT an error. The search engine
treats it as a dead end and restarts; it never surfaces as an exception.

Usage:
    from prw_exceptions import UnsupportedProblemError

    try:
        plan = planner.solve(problem)
    except UnsupportedProblemError as e:
        logger.error(f"Problem rejected: {e}")
        logger.error(f"Context: {e.context}")
"""

from typing import Any, Dict, Iterable, Optional


class PRWException(Exception):
    """
    Base exception for all PRW-specific errors.

    All PRW exceptions support:
    - Detailed error messages
    - Contextual information (dict)
    - Original exception chaining (via 'from' or original_exception)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception

    def __str__(self) -> str:
        base_msg = self.message

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


# ============================================================================
# PLANNING EXCEPTIONS
# ============================================================================


class PlanningException(PRWException):
    """Base exception for planning failures."""


class UnsupportedProblemError(PlanningException):
    """
    The problem declares a requirement the planner cannot reason about.

    Raised by RandomWalkPlanner.solve() before any search state is built.
    Never retried.

    Causes:
    - Action costs, preferences, goal utilities
    - Durative actions, continuous effects, timed initial literals
    - Numeric or object fluents, derived predicates
    - Hierarchical constructs (hierarchy, method constraints)
    """

    def __init__(
        self,
        message: str,
        requirements: Optional[Iterable[str]] = None,
        **kwargs,
    ):
        context = kwargs.get("context", {})
        context["requirements"] = sorted(requirements) if requirements else []
        kwargs["context"] = context
        super().__init__(message, **kwargs)
        self.requirements = context["requirements"]


class SearchExhaustedError(PlanningException):
    """
    The search budget ran out before a plan was found.

    Only raised when the caller configured a SearchBudget; the default
    search runs until it succeeds.

    Causes:
    - Iteration budget reached (reason="max_iterations")
    - Restart budget reached (reason="max_restarts")
    - Wall-clock limit reached (reason="time_limit")
    """

    def __init__(
        self,
        message: str,
        reason: Optional[str] = None,
        iterations: Optional[int] = None,
        restarts: Optional[int] = None,
        **kwargs,
    ):
        context = kwargs.get("context", {})
        context["reason"] = reason
        context["iterations"] = iterations
        context["restarts"] = restarts
        kwargs["context"] = context
        super().__init__(message, **kwargs)
        self.reason = reason
        self.iterations = iterations
        self.restarts = restarts


class SearchCancelledError(SearchExhaustedError):
    """The external cancellation signal was set while searching."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("reason", "cancelled")
        super().__init__(message, **kwargs)


class ProblemDefinitionError(PlanningException):
    """
    A problem description is malformed or could not be read.

    Causes:
    - File not found or not readable
    - YAML syntax error
    - Wrong structure (missing 'init', facts that are not lists/strings)
    - Unknown requirement keyword, duplicate action names
    """

    def __init__(self, message: str, source: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if source is not None:
            context["source"] = source
        kwargs["context"] = context
        super().__init__(message, **kwargs)


# ============================================================================
# CONFIGURATION EXCEPTIONS
# ============================================================================


class ConfigurationException(PRWException):
    """Base exception for configuration errors."""


class InvalidConfigError(ConfigurationException):
    """
    Invalid configuration.

    Causes:
    - Unknown or unavailable heuristic name
    - Out-of-range values (negative budgets, max_steps < 0)
    - Malformed config file or environment override
    """

    def __init__(self, message: str, parameter: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if parameter is not None:
            context["parameter"] = parameter
        kwargs["context"] = context
        super().__init__(message, **kwargs)


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================


def wrap_exception(
    exc: Exception, prw_exception_class: type[PRWException], message: str, **context
) -> PRWException:
    """
    Convert a generic exception into a PRW-specific exception.

    Args:
        exc: Original exception
        prw_exception_class: Target exception class (e.g. ProblemDefinitionError)
        message: Custom error message
        **context: Additional context information

    Returns:
        PRW-specific exception chained to the original exception

    Example:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise wrap_exception(e, ProblemDefinitionError, "Invalid YAML", path=str(path))
    """
    return prw_exception_class(message=message, context=context, original_exception=exc)


def get_user_friendly_message(exc: Exception, include_details: bool = False) -> str:
    """
    Build a user-facing error message from an exception.

    Args:
        exc: Exception object
        include_details: Whether to append technical details (debug mode)

    Returns:
        Short, user-facing error message
    """
    friendly_messages = {
        UnsupportedProblemError: "[ERROR] Problem not supported. It declares requirements outside plain STRIPS planning.",
        SearchExhaustedError: "[ERROR] No plan found within the configured search budget.",
        SearchCancelledError: "[ERROR] Search was cancelled before a plan was found.",
        ProblemDefinitionError: "[ERROR] The problem description could not be loaded.",
        InvalidConfigError: "[ERROR] Invalid configuration. Please check the planner settings.",
    }

    default_message = "[ERROR] An unexpected error occurred."

    exc_type = type(exc)
    user_message = friendly_messages.get(exc_type, default_message)

    if isinstance(exc, UnsupportedProblemError) and exc.requirements:
        user_message = (
            "[ERROR] Problem not supported. Unsupported requirements: "
            f"{', '.join(exc.requirements)}"
        )

    elif isinstance(exc, SearchExhaustedError) and not isinstance(
        exc, SearchCancelledError
    ):
        if exc.reason:
            user_message = (
                f"[ERROR] No plan found: search budget exhausted ({exc.reason}) "
                f"after {exc.iterations} iterations and {exc.restarts} restarts."
            )

    if include_details and isinstance(exc, PRWException):
        user_message += f"\n\nTechnical details: {exc.message}"
        if exc.context:
            user_message += f"\n   Context: {exc.context}"

    return user_message
