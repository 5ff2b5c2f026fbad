"""Dispatch failures raised before any Scenario call is made."""


class OperationError(Exception):
    """Base class for tool dispatch errors."""


class UnknownOperationError(OperationError):
    """Raised when no tool is registered under the requested name."""


class InvalidParamsError(OperationError):
    """Raised when tool arguments fail validation."""
