"""
Domain exceptions for the reservation and pricing engine.

Every rejection raised by the engine is a DomainException carrying a
machine-readable reason and one of five categories. The API layer renders
them with a single exception handler, so services never build HTTP errors
themselves.
"""
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import status


class ErrorCategory(str, Enum):
    """Transport-agnostic rejection categories."""

    VALIDATION = "validation"
    CONFLICT = "conflict"
    STATE_CONFLICT = "state_conflict"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


class RejectionReason(str, Enum):
    """Machine-readable rejection codes."""

    # validation
    INVALID_INTERVAL = "INVALID_INTERVAL"
    INVALID_DURATION = "INVALID_DURATION"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INVALID_COMMISSION_RATE = "INVALID_COMMISSION_RATE"
    OUTSIDE_AVAILABILITY = "OUTSIDE_AVAILABILITY"
    OPTION_DISABLED = "OPTION_DISABLED"
    SESSION_INACTIVE = "SESSION_INACTIVE"
    NOT_RETURNABLE = "NOT_RETURNABLE"

    # conflict
    SLOT_TAKEN = "SLOT_TAKEN"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"

    # state conflict
    ALREADY_PAID = "ALREADY_PAID"
    ITEM_CANCELLED = "ITEM_CANCELLED"
    CANNOT_CANCEL_PAID = "CANNOT_CANCEL_PAID"
    ALREADY_CANCELLED = "ALREADY_CANCELLED"
    NOT_PAID = "NOT_PAID"
    ALREADY_RETURNED = "ALREADY_RETURNED"

    # not found
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESERVATION_NOT_FOUND = "RESERVATION_NOT_FOUND"
    CLUB_NOT_FOUND = "CLUB_NOT_FOUND"
    PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"

    # forbidden
    CLUB_NOT_APPROVED = "CLUB_NOT_APPROVED"
    NOT_OWNER = "NOT_OWNER"
    ROLE_NOT_ALLOWED = "ROLE_NOT_ALLOWED"


class DomainException(Exception):
    """Base exception for all engine rejections."""

    category: ErrorCategory = ErrorCategory.VALIDATION
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        reason: RejectionReason,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.reason = reason
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return self.reason.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "category": self.category.value,
            "details": self.details,
        }


class ValidationException(DomainException):
    """Malformed input; the caller can fix the request and resubmit."""

    category = ErrorCategory.VALIDATION
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictException(DomainException):
    """The request clashes with existing reservations or capacity."""

    category = ErrorCategory.CONFLICT
    status_code = status.HTTP_409_CONFLICT


class StateConflictException(DomainException):
    """The reservation is not in a state that allows the transition."""

    category = ErrorCategory.STATE_CONFLICT
    status_code = status.HTTP_409_CONFLICT


class NotFoundException(DomainException):
    """Unknown club, resource, player or reservation."""

    category = ErrorCategory.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenException(DomainException):
    """The requester may not act on this resource."""

    category = ErrorCategory.FORBIDDEN
    status_code = status.HTTP_403_FORBIDDEN
