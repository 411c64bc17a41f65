"""
Notification data models.

The wire format keeps the field names used by the web client and the
dispatcher function (user_id, notification_type, item_data), while the
Python attributes use descriptive names.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, model_validator


class NotificationKind(str, Enum):
    """Kinds of notifications the dispatcher knows how to deliver."""

    TASK_REMINDER = "task_reminder"
    SPRINT_DEADLINE = "sprint_deadline"
    TASK_SLOT = "task_slot"
    OVERDUE = "overdue"
    DUE_SOON = "due_soon"


class NotificationSubject(BaseModel):
    """
    The item a notification is about (task, sprint, time slot).

    Attributes:
        id: Identifier of the item
        display_name: Human readable name (wire: ``name``)
        occurs_at: When the item is due / starts (wire: ``datetime``)
        project_name: Optional project the item belongs to
        client_name: Optional client the item is for
        status: Optional item status
    """

    id: str = Field(min_length=1, description="Item identifier")
    display_name: str = Field(
        alias="name", min_length=1, description="Item display name"
    )
    occurs_at: datetime = Field(
        alias="datetime", description="When the item is due or scheduled"
    )
    project_name: Optional[str] = None
    client_name: Optional[str] = None
    status: Optional[str] = None

    class Config:
        frozen = True
        populate_by_name = True


class NotificationRequest(BaseModel):
    """
    A request to notify one user about one item.

    Built once and never mutated; it is relay data and is not persisted.
    """

    recipient_id: str = Field(
        alias="user_id", min_length=1, description="User to notify"
    )
    kind: NotificationKind = Field(
        alias="notification_type", description="Kind of notification"
    )
    subject: NotificationSubject = Field(
        alias="item_data", description="Item that triggered the notification"
    )

    class Config:
        frozen = True
        populate_by_name = True

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to the JSON body expected by the dispatcher."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_wire(cls, payload: Dict[str, Any]) -> "NotificationRequest":
        """
        Parse a dispatcher JSON body.

        Raises:
            pydantic.ValidationError: If the payload is missing fields or
                carries an unknown notification type
        """
        return cls.model_validate(payload)


class RelayErrorKind(str, Enum):
    """Why a relay call failed."""

    PRECONDITION_FAILED = "PreconditionFailed"
    TRANSPORT_ERROR = "TransportError"
    PARSE_ERROR = "ParseError"
    UNKNOWN_ERROR = "UnknownError"


class RelayResult(BaseModel):
    """
    Outcome of a single send attempt.

    Exactly one of ``data`` (on success) or ``error`` (on failure) is set.
    Use :meth:`ok` and :meth:`fail` instead of the constructor.
    """

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    error_kind: Optional[RelayErrorKind] = None

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_outcome(self) -> "RelayResult":
        if self.success:
            if self.data is None:
                raise ValueError("successful result requires data")
            if self.error is not None or self.error_kind is not None:
                raise ValueError("successful result cannot carry an error")
        else:
            if self.error is None or self.error_kind is None:
                raise ValueError("failed result requires an error and error_kind")
            if self.data is not None:
                raise ValueError("failed result cannot carry data")
        return self

    @classmethod
    def ok(cls, data: Any) -> "RelayResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, kind: RelayErrorKind, message: str) -> "RelayResult":
        return cls(success=False, error=message, error_kind=kind)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the ``{success, data | error}`` shape used by callers."""
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}
