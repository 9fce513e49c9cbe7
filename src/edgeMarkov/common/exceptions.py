"""
Custom exception hierarchy for the edgeMarkov library.

This module defines the exceptions raised while building temporal graphs,
computing temporal metrics and simulating Edge-Markovian traces.

- ``TemporalNetworkError`` is the root, so callers can catch every library
  error with a single except clause
- ``ValidationError`` and its subclasses cover malformed input data
- ``ConfigurationError`` and its subclasses cover invalid parameters
- ``GraphConstructionError`` wraps unexpected failures while building snapshots
"""

from typing import Dict, Any, Optional, List, Union
import traceback


class TemporalNetworkError(Exception):
    """
    Base exception for all edgeMarkov errors.

    Parameters
    ----------
    message : str
        Human-readable error message describing what went wrong
    details : Dict[str, Any], optional
        Additional structured information about the error
    cause : Exception, optional
        The underlying exception that caused this error (for exception chaining)
    context : Dict[str, Any], optional
        Additional context about the operation that failed

    Examples
    --------
    >>> raise TemporalNetworkError("Simulation failed")
    >>> raise TemporalNetworkError(
    ...     "Invalid trace",
    ...     details={"nodes": 0, "duration": 10}
    ... )
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        self.message = message
        self.details = details or {}
        self.cause = cause
        self.context = context or {}

        full_message = message

        if self.details:
            detail_parts = []
            for key, value in self.details.items():
                if isinstance(value, (list, dict, set, frozenset)) and len(str(value)) > 100:
                    # Truncate long collections
                    detail_parts.append(f"{key}=<{type(value).__name__} with {len(value)} items>")
                else:
                    detail_parts.append(f"{key}={value}")

            if detail_parts:
                full_message += f" (Details: {', '.join(detail_parts)})"

        if self.context:
            context_parts = [f"{k}={v}" for k, v in self.context.items()]
            if context_parts:
                full_message += f" (Context: {', '.join(context_parts)})"

        super().__init__(full_message)

        if cause is not None:
            self.__cause__ = cause

    def add_context(self, **kwargs: Any) -> 'TemporalNetworkError':
        """
        Add additional context to the exception.

        Returns
        -------
        TemporalNetworkError
            Self, for method chaining
        """
        self.context.update(kwargs)
        return self

    def get_debug_info(self) -> Dict[str, Any]:
        """Get all available error information as a dictionary."""
        return {
            "exception_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None,
            "traceback": traceback.format_exc() if hasattr(self, '__traceback__') else None
        }


class ValidationError(TemporalNetworkError):
    """
    Exception raised for input validation errors.

    Parameters
    ----------
    message : str
        Descriptive error message explaining the validation failure
    field : str, optional
        Name of the field or argument that failed validation
    value : Any, optional
        The invalid value that caused the error
    expected : str, optional
        Description of what was expected
    details : Dict[str, Any], optional
        Additional details about the validation failure

    Examples
    --------
    >>> raise ValidationError("Snapshot contains a self-loop", field="edges")
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        expected: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> None:
        self.field = field
        self.value = value
        self.expected = expected

        enhanced_details = details or {}
        if field is not None:
            enhanced_details["field"] = field
        if value is not None:
            enhanced_details["invalid_value"] = value
        if expected is not None:
            enhanced_details["expected"] = expected

        if field:
            enhanced_message = f"Validation error in field '{field}': {message}"
        else:
            enhanced_message = f"Validation error: {message}"

        super().__init__(enhanced_message, details=enhanced_details, **kwargs)


class InvalidInputError(ValidationError):
    """
    Exception raised for malformed or empty temporal graphs.

    Covers traces without any snapshot, edges that reference nodes outside
    the declared node universe, self-loops and seed snapshots that do not
    fit the simulated node universe.

    Examples
    --------
    >>> raise InvalidInputError("Temporal graph has no snapshots", field="snapshots")
    """


class OutOfRangeError(ValidationError, IndexError):
    """
    Exception raised when a time index is outside ``[0, T)``.

    Also an ``IndexError`` so that sequence-style callers keep working.

    Parameters
    ----------
    message : str
        Description of the failed access
    index : int, optional
        The requested time index
    duration : int, optional
        Number of snapshots available
    """

    def __init__(
        self,
        message: str,
        index: Optional[int] = None,
        duration: Optional[int] = None,
        **kwargs
    ) -> None:
        self.index = index
        self.duration = duration

        details = kwargs.pop("details", None) or {}
        if index is not None:
            details["index"] = index
        if duration is not None:
            details["duration"] = duration

        super().__init__(message, details=details, **kwargs)


class DataFormatError(ValidationError):
    """
    Exception raised for data format and structure errors.

    Parameters
    ----------
    message : str
        Description of the format error
    format_type : str, optional
        Expected format (e.g., "start_end", "DataFrame")
    file_path : str, optional
        Path to the problematic file
    line_number : int, optional
        Line number where error occurred (for file parsing)

    Examples
    --------
    >>> raise DataFormatError(
    ...     "Expected 4 columns per line",
    ...     format_type="start_end",
    ...     file_path="/path/to/contacts.txt",
    ...     line_number=12
    ... )
    """

    def __init__(
        self,
        message: str,
        format_type: Optional[str] = None,
        file_path: Optional[str] = None,
        line_number: Optional[int] = None,
        **kwargs
    ) -> None:
        details = kwargs.get('details') or {}

        if format_type:
            details["format_type"] = format_type
        if file_path:
            details["file_path"] = file_path
        if line_number is not None:
            details["line_number"] = line_number

        kwargs["details"] = details
        super().__init__(message, **kwargs)


class ConfigurationError(TemporalNetworkError):
    """
    Exception raised for invalid configuration or parameter values.

    Parameters
    ----------
    message : str
        Description of the configuration error
    parameter : str, optional
        Name of the problematic parameter
    value : Any, optional
        The invalid parameter value
    valid_options : List[Any], optional
        List of valid options for the parameter
    function : str, optional
        Name of the function where the error occurred

    Examples
    --------
    >>> raise ConfigurationError(
    ...     "Invalid export format",
    ...     parameter="format",
    ...     value="gexf",
    ...     valid_options=["start_end", "create_delete"]
    ... )
    """

    def __init__(
        self,
        message: str,
        parameter: Optional[str] = None,
        value: Optional[Any] = None,
        valid_options: Optional[List[Any]] = None,
        function: Optional[str] = None,
        **kwargs
    ) -> None:
        self.parameter = parameter
        self.value = value
        self.valid_options = valid_options
        self.function = function

        details = kwargs.get('details') or {}
        if parameter:
            details["parameter"] = parameter
        if value is not None:
            details["invalid_value"] = value
        if valid_options:
            details["valid_options"] = valid_options
        if function:
            details["function"] = function

        enhanced_message = message
        if parameter and valid_options:
            enhanced_message += f". Valid options for '{parameter}': {valid_options}"

        kwargs["details"] = details
        super().__init__(enhanced_message, **kwargs)


class InvalidParametersError(ConfigurationError):
    """
    Exception raised when model probabilities fall outside ``[0, 1]``.

    Examples
    --------
    >>> raise InvalidParametersError(
    ...     "Creation probability must lie in [0, 1]",
    ...     parameter="p",
    ...     value=1.5
    ... )
    """


class GraphConstructionError(TemporalNetworkError):
    """
    Exception raised when building snapshot graphs fails unexpectedly.

    Parameters
    ----------
    message : str
        Description of the construction error
    node_count : int, optional
        Size of the node universe when the error occurred
    edge_count : int, optional
        Number of edges processed when the error occurred
    operation : str, optional
        Specific operation that failed (e.g., "build_temporal_graph")
    """

    def __init__(
        self,
        message: str,
        node_count: Optional[int] = None,
        edge_count: Optional[int] = None,
        operation: Optional[str] = None,
        **kwargs
    ) -> None:
        self.node_count = node_count
        self.edge_count = edge_count
        self.operation = operation

        context = {}
        if node_count is not None:
            context["node_count"] = node_count
        if edge_count is not None:
            context["edge_count"] = edge_count
        if operation:
            context["operation"] = operation

        super().__init__(message, context=context, **kwargs)


class ComputationError(TemporalNetworkError):
    """
    Exception raised when an operation fails for reasons unrelated to input
    validity, such as an I/O failure while writing results.

    Parameters
    ----------
    message : str
        Description of the failure
    operation : str, optional
        The operation that failed
    error_type : str, optional
        Kind of failure (e.g., "io", "memory")
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        error_type: Optional[str] = None,
        **kwargs
    ) -> None:
        self.operation = operation
        self.error_type = error_type

        context = kwargs.pop("context", None) or {}
        if operation:
            context["operation"] = operation
        if error_type:
            context["error_type"] = error_type

        super().__init__(message, context=context, **kwargs)


# Convenience functions for common error patterns

def validate_parameter(
    value: Any,
    valid_options: List[Any],
    parameter_name: str,
    function_name: Optional[str] = None
) -> None:
    """
    Validate that a parameter value is in the list of valid options.

    Raises
    ------
    ConfigurationError
        If value is not in valid_options
    """
    if value not in valid_options:
        raise ConfigurationError(
            f"Invalid value for parameter '{parameter_name}': {value}",
            parameter=parameter_name,
            value=value,
            valid_options=valid_options,
            function=function_name
        )


def require_positive(
    value: Union[int, float],
    parameter_name: str,
    allow_zero: bool = False
) -> None:
    """
    Validate that a numeric parameter is positive.

    Raises
    ------
    InvalidInputError
        If value is not positive (or negative when allow_zero=True)
    """
    if allow_zero and value < 0:
        raise InvalidInputError(
            f"'{parameter_name}' must be non-negative, got {value}",
            field=parameter_name,
            value=value
        )
    elif not allow_zero and value <= 0:
        raise InvalidInputError(
            f"'{parameter_name}' must be positive, got {value}",
            field=parameter_name,
            value=value
        )


def require_probability(value: float, parameter_name: str) -> float:
    """
    Validate that a value is a probability in ``[0, 1]``.

    Returns
    -------
    float
        The value converted to float

    Raises
    ------
    InvalidParametersError
        If value is not a number or lies outside ``[0, 1]`` (NaN included)
    """
    try:
        probability = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidParametersError(
            f"Parameter '{parameter_name}' must be a number, got {value!r}",
            parameter=parameter_name,
            value=value,
            cause=e
        )

    if not 0.0 <= probability <= 1.0:
        raise InvalidParametersError(
            f"Parameter '{parameter_name}' must lie in [0, 1], got {value}",
            parameter=parameter_name,
            value=value
        )

    return probability
