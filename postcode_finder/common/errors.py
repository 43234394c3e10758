"""Domain errors and failure typing."""


class FinderError(Exception):
    """Base class for postcode finder failures."""

    error_code = "FINDER_ERROR"


class ConfigError(FinderError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class ContractError(FinderError):
    """Raised when an input file breaks the tabular ingestion contract."""

    error_code = "CONTRACT_ERROR"


class ValidationError(FinderError):
    """Raised for request parameters that cannot be used (empty postcode, bad radius)."""

    error_code = "VALIDATION_ERROR"


class InvalidInputError(ValidationError):
    """Raised when the geocoder rejects the free-text postcode."""

    error_code = "INVALID_INPUT"


class NotFoundError(FinderError):
    """Raised when a postcode is not in the dataset or the geocoder has no match."""

    error_code = "NOT_FOUND"


class DataIntegrityError(FinderError):
    """Raised for a dataset row with unusable coordinates.

    Never escapes dataset loading: the row is excluded and counted.
    """

    error_code = "DATA_INTEGRITY_ERROR"


class ExternalServiceError(FinderError):
    """Raised when the geocoding service is unreachable or erroring."""

    error_code = "EXTERNAL_SERVICE_ERROR"
