#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the mathfield library.

This module defines the exception classes raised by the editing engine. Each
exception carries enough context for the caller (usually a UI layer) to decide
whether to recover, report, or treat the condition as a bug.

Exception Hierarchy
-------------------
- MathFieldError (base exception)

  - ValidationError (parameter/option validation)
    - ConfigError (configuration file discovery and loading)

  - ParsingError (malformed LaTeX markup)

  - StructuralIntegrityError (tree or cursor invariants violated)
    - NotAttachedError (operation needs an attached node)

Notes
-----
Unknown LaTeX commands are not errors: they degrade into opaque tokens.
Navigation and deletion at structural boundaries are defined no-ops and never
raise.

"""

from __future__ import annotations

from typing import Any


class MathFieldError(Exception):
    """Base exception class for all mathfield-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(MathFieldError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class ConfigError(ValidationError):
    """Exception raised when a configuration file cannot be read or applied.

    Parameters
    ----------
    message : str
        Description of the configuration problem
    config_path : str, optional
        Path of the offending configuration file
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, config_path: str | None = None, original_error: Exception | None = None):
        """Initialize the configuration error."""
        super().__init__(message, parameter_name="config", parameter_value=config_path, original_error=original_error)
        self.config_path = config_path


class ParsingError(MathFieldError):
    """Exception raised when LaTeX markup cannot be parsed.

    A parse either succeeds completely or fails with this error; there is no
    partial result.

    Parameters
    ----------
    message : str, optional
        Custom error message. If not provided, one is built from the position
        and the expected construct.
    position : int, default 0
        Zero-based offset into the source string where parsing stopped
    expected : str, default ""
        Description of the construct the parser expected at ``position``
    source : str, optional
        The full markup being parsed
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str | None = None,
        position: int = 0,
        expected: str = "",
        source: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the parsing error with position details."""
        if message is None:
            message = f"Parse error at position {position}: expected {expected}"
        super().__init__(message, original_error=original_error)
        self.position = position
        self.expected = expected
        self.source = source

    def excerpt(self, width: int = 20) -> str:
        """Return the source around the error with a caret under the offending position.

        Parameters
        ----------
        width : int, default 20
            Number of characters of context on each side

        Returns
        -------
        str
            Two lines: the source excerpt and a caret marker, or an empty
            string when the source is unknown.

        """
        if self.source is None:
            return ""
        start = max(0, self.position - width)
        end = min(len(self.source), self.position + width)
        snippet = self.source[start:end]
        return f"{snippet}\n{' ' * (self.position - start)}^"


class StructuralIntegrityError(MathFieldError):
    """Exception raised when a tree or cursor invariant is violated.

    These errors indicate a bug in the caller or in the engine, not bad user
    input; they are not meant to be recovered from.

    Parameters
    ----------
    message : str
        Description of the violated invariant
    node_id : int, optional
        Identifier of the node involved, when known
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, node_id: int | None = None, original_error: Exception | None = None):
        """Initialize the structural integrity error."""
        super().__init__(message, original_error=original_error)
        self.node_id = node_id


class NotAttachedError(StructuralIntegrityError):
    """Exception raised when removing or navigating from a node that has no parent block."""

    def __init__(self, node_id: int | None = None, message: str | None = None):
        """Initialize the not-attached error."""
        if message is None:
            message = f"Node {node_id} is not attached to a block"
        super().__init__(message, node_id=node_id)
