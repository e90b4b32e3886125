from coachlink.core.errors import CoachlinkError, FeatureUnavailableError, NetworkError, StorageAccessError
from coachlink.core.result import BatchResult, OperationResult

__all__ = [
    "BatchResult",
    "CoachlinkError",
    "FeatureUnavailableError",
    "NetworkError",
    "OperationResult",
    "StorageAccessError",
]
