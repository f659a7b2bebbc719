"""
tests/test_exceptions.py

Tests for the exception hierarchy and helpers (prw_exceptions).
"""

import pytest

from prw_exceptions import (
    ConfigurationException,
    InvalidConfigError,
    PlanningException,
    PRWException,
    ProblemDefinitionError,
    SearchCancelledError,
    SearchExhaustedError,
    UnsupportedProblemError,
    get_user_friendly_message,
    wrap_exception,
)


class TestHierarchy:
    """Class relationships."""

    @pytest.mark.parametrize(
        "cls,base",
        [
            (UnsupportedProblemError, PlanningException),
            (SearchExhaustedError, PlanningException),
            (SearchCancelledError, SearchExhaustedError),
            (ProblemDefinitionError, PlanningException),
            (InvalidConfigError, ConfigurationException),
            (PlanningException, PRWException),
            (ConfigurationException, PRWException),
        ],
    )
    def test_subclass(self, cls, base):
        """Test: Every error is catchable through its base."""
        assert issubclass(cls, base)


class TestContext:
    """Context handling and string rendering."""

    def test_str_with_context_and_cause(self):
        """Test: Context and cause are appended."""
        exc = PRWException(
            "Boom", context={"k": 1}, original_exception=ValueError("inner")
        )

        assert str(exc) == "Boom | Context: k=1 | Caused by: ValueError: inner"
        assert repr(exc) == "PRWException(message='Boom', context={'k': 1})"

    def test_unsupported_requirements_sorted(self):
        """Test: Requirements stored sorted, in context and attribute."""
        exc = UnsupportedProblemError(
            "no", requirements=[":preferences", ":action-costs"]
        )

        assert exc.requirements == [":action-costs", ":preferences"]
        assert exc.context["requirements"] == exc.requirements

    def test_search_exhausted_fields(self):
        """Test: Reason and counters are kept."""
        exc = SearchExhaustedError("x", reason="max_restarts", iterations=10, restarts=2)

        assert (exc.reason, exc.iterations, exc.restarts) == ("max_restarts", 10, 2)
        assert exc.context["reason"] == "max_restarts"

    def test_cancelled_default_reason(self):
        """Test: Cancellation reason defaults to 'cancelled'."""
        assert SearchCancelledError("stop").reason == "cancelled"

    def test_wrap_exception(self):
        """Test: Wrapping keeps the original and the context."""
        original = OSError("disk")
        wrapped = wrap_exception(original, ProblemDefinitionError, "Cannot read", source="p.yaml")

        assert isinstance(wrapped, ProblemDefinitionError)
        assert wrapped.original_exception is original
        assert wrapped.context == {"source": "p.yaml"}


class TestUserFriendlyMessage:
    """get_user_friendly_message()."""

    def test_unsupported(self):
        """Test: Lists the offending requirements."""
        exc = UnsupportedProblemError("no", requirements=[":numeric-fluents"])

        assert get_user_friendly_message(exc) == (
            "[ERROR] Problem not supported. Unsupported requirements: :numeric-fluents"
        )

    def test_exhausted(self):
        """Test: Names the reason and the counters."""
        exc = SearchExhaustedError("x", reason="max_iterations", iterations=40, restarts=10)

        assert get_user_friendly_message(exc) == (
            "[ERROR] No plan found: search budget exhausted (max_iterations) "
            "after 40 iterations and 10 restarts."
        )

    def test_cancelled(self):
        """Test: Cancellation has its own message."""
        message = get_user_friendly_message(SearchCancelledError("stop"))
        assert message == "[ERROR] Search was cancelled before a plan was found."

    def test_unknown_exception(self):
        """Test: Foreign exceptions get the generic message."""
        assert get_user_friendly_message(RuntimeError("x")) == (
            "[ERROR] An unexpected error occurred."
        )

    def test_details(self):
        """Test: include_details appends message and context."""
        exc = InvalidConfigError("max_steps must be >= 0", parameter="max_steps")
        message = get_user_friendly_message(exc, include_details=True)

        assert message.startswith("[ERROR] Invalid configuration.")
        assert "Technical details: max_steps must be >= 0" in message
        assert "'parameter': 'max_steps'" in message
