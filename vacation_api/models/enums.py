"""Role and vacation status enumerations."""

from enum import IntEnum


class UserRole(IntEnum):
    """Account roles; a lower value carries more privileges."""

    ADMIN = 1
    USER = 2

    def satisfies(self, required: "UserRole") -> bool:
        return self <= required

    @classmethod
    def from_value(cls, value) -> "UserRole | None":
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return None


class VacationStatus(IntEnum):
    APPROVED = 1
    REJECTED = 2
    PENDING = 3

    @classmethod
    def from_value(cls, value) -> "VacationStatus | None":
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return None
