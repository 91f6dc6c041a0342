"""Error taxonomy for client registration, dispatch and storage."""
from __future__ import annotations


class FunctionsError(Exception):
    """Base for errors raised by the functions core."""


class InvalidClientConfigError(FunctionsError, ValueError):
    """Raised when a client configuration is malformed (bad base address, duplicate headers)."""


class DuplicateNameError(FunctionsError):
    """Raised when a named client is registered twice."""

    def __init__(self, name: str) -> None:
        super().__init__(f"client already registered: {name}")
        self.name = name


class UnknownClientNameError(FunctionsError, LookupError):
    """Raised when resolving a name that was never registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown client name: {name}")
        self.name = name


class InvalidTargetError(FunctionsError, ValueError):
    """Raised when a request target cannot be built into an absolute URL."""


class TransportError(FunctionsError):
    """Network-level failure (refused, DNS, timeout). HTTP error statuses are not transport errors."""

    def __init__(self, target_url: str, cause: BaseException) -> None:
        super().__init__(f"request to {target_url} failed: {cause}")
        self.target_url = target_url
        self.cause = cause


class StorageWriteError(FunctionsError):
    """Raised when the blob sink is unavailable or rejects a write."""

    def __init__(self, key: str, cause: BaseException | None = None) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"blob write failed for {key}{detail}")
        self.key = key
        self.cause = cause


class AvatarNotFoundError(FunctionsError):
    """Raised when the avatar service answers with a non-success status."""

    def __init__(self, profile_id: str, status_code: int) -> None:
        super().__init__(f"avatar for {profile_id} not available (http {status_code})")
        self.profile_id = profile_id
        self.status_code = status_code
