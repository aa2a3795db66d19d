class TMDSimError(Exception):
    """Base class for all tmd-sim errors."""


class ConfigurationError(TMDSimError, ValueError):
    """Invalid model configuration (bad absorber, bad field type, ...)."""

    def __init__(self, field, message):
        self.field = field
        super().__init__(f"{field}: {message}")


class InputRangeError(TMDSimError, ValueError):
    """Empty sweep, zero floors and similar out-of-range inputs."""


class NumericalError(TMDSimError, ArithmeticError):
    """Eigenproblem or linear solve failed for a physically invalid system."""

    def __init__(self, message, omega=None):
        self.omega = omega
        super().__init__(message)
