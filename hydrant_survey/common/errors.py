"""Domain errors and failure typing."""


class SurveyError(Exception):
    """Base class for survey failures."""

    error_code = "SURVEY_ERROR"


class ConfigError(SurveyError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class ValidationError(SurveyError):
    """Raised when a record or label fails boundary validation."""

    error_code = "VALIDATION_ERROR"


class InvalidStateError(SurveyError):
    """Raised when an operation is not allowed in the current session state."""

    error_code = "INVALID_STATE"


class StorageError(SurveyError):
    """Raised when the session blob cannot be written."""

    error_code = "STORAGE_ERROR"


class DispatchError(SurveyError):
    """Raised when a dispatch message could not be handed off."""

    error_code = "DISPATCH_ERROR"


class LocationError(SurveyError):
    """Base class for location sensor failures."""

    error_code = "LOCATION_ERROR"


class LocationUnavailable(LocationError):
    error_code = "LOCATION_UNAVAILABLE"


class LocationDenied(LocationError):
    error_code = "LOCATION_DENIED"


class LocationTimeout(LocationError):
    error_code = "LOCATION_TIMEOUT"
