"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from enum import Enum
from typing import Self
from uuid import UUID


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class RegistrationId:
    """Unique identifier for a Registration."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Capacity:
    """Non-negative ticket limit. Zero means unlimited."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")

    @property
    def is_unlimited(self) -> bool:
        return self.value == 0

    def admits(self, taken: int) -> bool:
        """Return True if one more seat can be taken."""
        return self.is_unlimited or taken < self.value


@dataclass(frozen=True)
class Media:
    """A stored media object (banner or gallery image)."""

    url: str
    public_id: str

    def __post_init__(self) -> None:
        if not self.public_id:
            raise ValueError("Media public_id cannot be empty")


class EventStatus(Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    LIVE = "live"
    ENDED = "ended"
    CANCELLED = "cancelled"


class LocationType(Enum):
    ONLINE = "online"
    OFFLINE = "offline"


class RegistrationStatus(Enum):
    REGISTERED = "registered"
    CANCELLED = "cancelled"


class OrganizerStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    BLOCKED = "blocked"


class Severity(Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Role(Enum):
    USER = "user"
    ORGANIZER = "organizer"
    ADMIN = "admin"


@dataclass(frozen=True)
class Principal:
    """Caller identity resolved by the upstream auth gateway."""

    id: UUID
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def is_organizer(self) -> bool:
        return self.role is Role.ORGANIZER
