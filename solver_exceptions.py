"""
solver_exceptions.py

Central exception hierarchy for the slot-puzzle solver.

A constraint set that cannot be satisfied is NOT an exception: it shows up as
the CONFLICT outcome and, at the end of a search, as an empty solution list.
The classes below cover defects in how the engine is configured or driven.

Exception hierarchy:
    SolverException (base)
    ├── PreconditionViolation
    │   ├── SlotIndexError
    │   └── IndeterminateValueError
    ├── DefinitionException
    │   ├── ConstraintDefinitionError
    │   ├── PuzzleDefinitionError
    │   └── EncodingError
    └── ConfigurationException
        └── InvalidConfigError

Usage:
    from solver_exceptions import SlotIndexError, SolverException

    try:
        solution.set(index, Truth.YES)
    except SlotIndexError as e:
        logger.error(f"Bad slot index: {e}")
        logger.error(f"Context: {e.context}")
"""

from typing import Any, Dict, Optional


class SolverException(Exception):
    """
    Base exception for all solver-specific errors.

    All solver exceptions support:
    - A detailed message
    - Contextual information (dict)
    - Chaining of the original exception (also via 'from')
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
# PRECONDITION VIOLATIONS
# ============================================================================


class PreconditionViolation(SolverException):
    """Base exception for calls that break a documented precondition."""


class SlotIndexError(PreconditionViolation, IndexError):
    """
    A slot index outside ``[0, slot_count)`` was used.

    Causes:
    - Encoding arithmetic that maps past the end of the puzzle
    - Negative indexes
    - A constraint attached to a puzzle with fewer slots than it expects
    """

    def __init__(
        self,
        message: str,
        index: Optional[int] = None,
        slot_count: Optional[int] = None,
        **kwargs,
    ):
        context = kwargs.get("context", {})
        context["index"] = index
        context["slot_count"] = slot_count
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class IndeterminateValueError(PreconditionViolation, ValueError):
    """
    MAYBE was passed where a definite value (NO or YES) is required.

    Causes:
    - ``Solution.set(index, Truth.MAYBE)``
    - A constraint constructed with MAYBE as its target value
    """

    def __init__(self, message: str, value: Optional[Any] = None, **kwargs):
        context = kwargs.get("context", {})
        context["value"] = value
        kwargs["context"] = context
        super().__init__(message, **kwargs)


# ============================================================================
# DEFINITION EXCEPTIONS
# ============================================================================


class DefinitionException(SolverException):
    """Base exception for malformed puzzle or constraint definitions."""


class ConstraintDefinitionError(DefinitionException):
    """
    A constraint was constructed with inconsistent arguments.

    Causes:
    - ExactlyN with n larger than its index list (or negative)
    - Identical with index lists of different lengths
    - Something that is not a constraint passed to Puzzle.add_constraint
    """

    def __init__(self, message: str, constraint_name: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        context["constraint_name"] = constraint_name
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class PuzzleDefinitionError(DefinitionException):
    """
    A puzzle was constructed with an invalid shape.

    Causes:
    - Negative slot count
    - Non-integer slot count
    """


class EncodingError(DefinitionException):
    """
    Collaborator input could not be mapped onto slots.

    Causes:
    - Sudoku grid with the wrong number of cells
    - Given values outside the puzzle's value range
    - Latin square of order < 1
    """

    def __init__(self, message: str, encoding: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        context["encoding"] = encoding
        kwargs["context"] = context
        super().__init__(message, **kwargs)


# ============================================================================
# CONFIGURATION EXCEPTIONS
# ============================================================================


class ConfigurationException(SolverException):
    """Base exception for configuration errors."""


class InvalidConfigError(ConfigurationException):
    """
    Invalid configuration.

    Causes:
    - Malformed YAML
    - Top-level document that is not a mapping
    - Unknown log level names
    """

    def __init__(self, message: str, config_path: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if config_path is not None or "config_path" not in context:
            context["config_path"] = config_path
        kwargs["context"] = context
        super().__init__(message, **kwargs)


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================


def wrap_exception(
    exc: Exception,
    solver_exception_class: type[SolverException],
    message: str,
    **context,
) -> SolverException:
    """
    Convert a generic exception into a solver-specific exception.

    Args:
        exc: Original exception
        solver_exception_class: Target class (e.g. InvalidConfigError)
        message: Custom error message
        **context: Additional context information

    Returns:
        Solver exception chained to the original exception

    Example:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise wrap_exception(e, InvalidConfigError, "Bad config", path=path)
    """
    return solver_exception_class(
        message=message, context=context, original_exception=exc
    )


def get_user_friendly_message(exc: Exception, include_details: bool = False) -> str:
    """
    Build a user-facing error message from an exception.

    Args:
        exc: Exception object
        include_details: Whether to append technical details (debug mode)

    Returns:
        Short message suitable for the command line
    """
    friendly_messages = {
        SlotIndexError: "[ERROR] A constraint refers to a slot that does not exist.",
        IndeterminateValueError: "[ERROR] A constraint or assignment used MAYBE where NO or YES is required.",
        ConstraintDefinitionError: "[ERROR] A constraint was defined with inconsistent arguments.",
        PuzzleDefinitionError: "[ERROR] The puzzle definition is invalid.",
        EncodingError: "[ERROR] The puzzle input could not be read.",
        InvalidConfigError: "[ERROR] Invalid configuration. Please check the settings file.",
    }

    default_message = "[ERROR] An unexpected error occurred."

    user_message = friendly_messages.get(type(exc), default_message)

    if isinstance(exc, SlotIndexError) and exc.context.get("index") is not None:
        user_message = (
            f"[ERROR] Slot {exc.context['index']} does not exist "
            f"(puzzle has {exc.context.get('slot_count', '?')} slots)."
        )

    if include_details and isinstance(exc, SolverException):
        user_message += f"\n\nTechnical details: {exc.message}"
        if exc.context:
            user_message += f"\n   Context: {exc.context}"

    return user_message
