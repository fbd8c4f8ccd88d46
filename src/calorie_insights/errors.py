"""Error taxonomy for estimate normalization and its collaborators."""


class SchemaError(ValueError):
    """Parsed model output is structurally unusable."""

    def __init__(self, message: str, *, field: str | None, received: object) -> None:
        super().__init__(message)
        self.field = field
        self.received = received


class ResponseParseError(ValueError):
    """Repaired model output still could not be parsed as JSON."""

    def __init__(self, message: str, *, text: str) -> None:
        super().__init__(message)
        self.text = text


class UpstreamUnavailable(RuntimeError):
    """The external model could not be reached or is not configured."""


class InvalidEstimateRequest(ValueError):
    """An estimate was requested with unusable inputs."""


class EstimationFailed(RuntimeError):
    """The model answered but its output was rejected."""

    def __init__(self, message: str, *, reason: str) -> None:
        super().__init__(message)
        self.reason = reason


class InvalidMealEntry(ValueError):
    """A meal could not be logged from the provided fields."""


class DashboardBusy(RuntimeError):
    """A dashboard batch is already in flight for this user."""
