"""
Shop errors — one taxonomy for every service outcome.

Every service operation returns Result[T, ShopError]. Adapter faults
(StoreError, Firestore exceptions) are converted here and never cross
a service boundary as raised exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class ErrorKind(Enum):
    """What went wrong, from the caller's point of view."""

    UNAUTHENTICATED = auto()
    INVALID_ORDER = auto()
    STORAGE_FAILURE = auto()
    REMOTE_WRITE_FAILURE = auto()
    MIRROR_WRITE_FAILURE = auto()
    SUBMIT_IN_PROGRESS = auto()


@dataclass(frozen=True, slots=True)
class ShopError:
    """
    Typed service error.

    cause: the underlying adapter error or exception, when there is one.
    order: the committed order, only for MIRROR_WRITE_FAILURE.
    """

    kind: ErrorKind
    message: str
    cause: Any = None
    order: Any = None

    def __str__(self) -> str:
        return f"{self.kind.name}: {self.message}"


class Errors:
    @staticmethod
    def unauthenticated(msg: str = "No signed-in user") -> ShopError:
        return ShopError(ErrorKind.UNAUTHENTICATED, msg)

    @staticmethod
    def invalid_order(msg: str) -> ShopError:
        return ShopError(ErrorKind.INVALID_ORDER, msg)

    @staticmethod
    def storage(msg: str, cause: Any = None) -> ShopError:
        return ShopError(ErrorKind.STORAGE_FAILURE, msg, cause)

    @staticmethod
    def remote_write(msg: str, cause: Any = None) -> ShopError:
        return ShopError(ErrorKind.REMOTE_WRITE_FAILURE, msg, cause)

    @staticmethod
    def mirror_write(msg: str, order: Any, cause: Any = None) -> ShopError:
        return ShopError(ErrorKind.MIRROR_WRITE_FAILURE, msg, cause, order)

    @staticmethod
    def submit_in_progress() -> ShopError:
        return ShopError(ErrorKind.SUBMIT_IN_PROGRESS, "An order is already being placed")


__all__ = ("ErrorKind", "ShopError", "Errors")
