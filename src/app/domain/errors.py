from __future__ import annotations

from typing import Optional


class RecipeBoxError(Exception):
    pass


class RecordRejectedError(RecipeBoxError):
    pass


class MissingIdentityError(RecordRejectedError):
    def __init__(self, message: str = "Recipe record has neither idMeal nor id"):
        super().__init__(message)


class MalformedRecordError(RecordRejectedError):
    def __init__(self, reason: str):
        super().__init__(f"Malformed recipe record: {reason}")
        self.reason = reason


class ValidationFailure(RecipeBoxError):
    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"Missing required field: {field}")
        self.field = field


class StorageBackendError(RecipeBoxError):
    def __init__(self, key: str, reason: str):
        super().__init__(f"Storage backend error for {key}: {reason}")
        self.key = key
        self.reason = reason


class PersistenceFailure(RecipeBoxError):
    def __init__(self, key: str, operation: str, reason: str):
        super().__init__(f"Failed to {operation} {key}: {reason}")
        self.key = key
        self.operation = operation
        self.reason = reason


class CorruptStateError(RecipeBoxError):
    def __init__(self, key: str, reason: str):
        super().__init__(f"Stored value for {key} is unreadable: {reason}")
        self.key = key
        self.reason = reason


class RemoteFetchFailure(RecipeBoxError):
    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        super().__init__(f"Catalog fetch failed for {url}: {reason}")
        self.url = url
        self.reason = reason
        self.status_code = status_code


class StoreClosedError(RecipeBoxError):
    def __init__(self, store: str):
        super().__init__(f"{store} is closed")
        self.store = store
