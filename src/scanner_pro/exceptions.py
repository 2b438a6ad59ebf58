"""Custom exceptions for Scanner Pro."""


class ScannerProError(Exception):
    """Base exception for all Scanner Pro errors."""
    pass


class ConfigurationError(ScannerProError):
    """Raised when configuration is invalid."""
    pass


class StorageError(ScannerProError):
    """Raised when the local key/value store cannot be read or written."""
    pass


class RecordFormatError(ScannerProError):
    """Raised when a persisted scan record has an unexpected shape."""
    pass
