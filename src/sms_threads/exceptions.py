"""Custom exceptions for SMS Threads."""


class SmsThreadsError(Exception):
    """Base exception for all SMS Threads errors."""


class StorageError(SmsThreadsError):
    """Exception raised when the persistent key-value store fails."""


class MissingIdentifierError(SmsThreadsError):
    """Exception raised when a message carries no usable thread identifier."""


class ConfigurationError(SmsThreadsError):
    """Exception raised for configuration related errors."""
