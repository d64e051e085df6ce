"""User entity: account owning tickets."""

from dataclasses import dataclass
from datetime import datetime

from repshield.domain.value_objects.enums import UserRole

ANONYMOUS_USER_ID = "anonymous"


@dataclass
class User:
    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: UserRole = UserRole.USER
    created_at: datetime | None = None

    @staticmethod
    def id_from_email(email: str) -> str:
        """Lead-capture users are keyed by their email: '@' and '.' become '_'."""
        return email.strip().lower().replace("@", "_").replace(".", "_")

    @classmethod
    def from_lead(cls, name: str, email: str) -> "User":
        parts = name.split()
        return cls(
            id=cls.id_from_email(email),
            email=email.strip().lower(),
            first_name=parts[0] if parts else None,
            last_name=" ".join(parts[1:]) or None,
        )

    @classmethod
    def anonymous(cls) -> "User":
        return cls(id=ANONYMOUS_USER_ID)
