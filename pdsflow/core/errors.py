"""Custom exceptions used across PdsFlow."""


class PdsFlowError(Exception):
    """Base error for the application."""


class ConfigError(PdsFlowError):
    """Configuration related error."""


class ExtractionError(PdsFlowError):
    """Raised when a workbook cannot be extracted."""


class UploadRejectedError(PdsFlowError):
    """Raised when an uploaded file fails the pre-extraction checks."""
