"""Scanner Pro - QR/barcode payload classification and scan history."""

__version__ = "0.1.0"

from .payload import (
    ClassifiedPayload,
    ScanPayloadType,
    classify,
)
from .history import (
    DateGroup,
    ScanRecord,
    format_timestamp,
    group_by_date,
)
from .config import (
    ScannerProConfig,
    ScannerConfig,
    StorageConfig,
)
from .exceptions import (
    ScannerProError,
    ConfigurationError,
    StorageError,
    RecordFormatError,
)
from .persistence import (
    AppSettings,
    KeyValueStore,
    ScanStore,
)
from .scanner import ScanHandler

__all__ = [
    # Classifier
    "ClassifiedPayload",
    "ScanPayloadType",
    "classify",
    # History
    "DateGroup",
    "ScanRecord",
    "format_timestamp",
    "group_by_date",
    # Configuration
    "ScannerProConfig",
    "ScannerConfig",
    "StorageConfig",
    # Exceptions
    "ScannerProError",
    "ConfigurationError",
    "StorageError",
    "RecordFormatError",
    # Persistence
    "AppSettings",
    "KeyValueStore",
    "ScanStore",
    # Scan handling
    "ScanHandler",
]
