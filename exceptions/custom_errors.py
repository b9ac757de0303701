class NoFeasibleSolutionError(Exception):
    """Raised when the solver reports that no feasible assignment exists for the model as built."""

    pass


class ModelConstructionError(Exception):
    """Raised when the integer program is malformed, e.g. a candidate references an unknown demand unit."""

    pass


class InvalidTimeRangeError(Exception):
    """Raised when a time range cannot be parsed or ends before it starts."""

    pass


class InputMismatchError(Exception):
    """Raised when input records reference workers, units or sites that were not supplied."""

    pass


class InvalidQuotaError(Exception):
    """Raised when a floater quota or work percentage is out of range."""

    pass


class InvalidLayoutError(Exception):
    """Raised when a multi-flow room layout is inconsistent with the configured rooms."""

    pass


# Mapping of custom exceptions to HTTP status codes
CUSTOM_ERRORS = {
    NoFeasibleSolutionError: 422,
    ModelConstructionError: 500,
    InvalidTimeRangeError: 400,
    InputMismatchError: 400,
    InvalidQuotaError: 400,
    InvalidLayoutError: 400,
}
