"""Port interface for user persistence."""

from abc import ABC, abstractmethod

from repshield.domain.entities.user import User


class UserRepository(ABC):
    @abstractmethod
    async def upsert(self, user: User) -> User:
        """Insert the user, or refresh name/email of an existing one."""
        ...

    @abstractmethod
    async def get_by_id(self, user_id: str) -> User | None:
        ...

    @abstractmethod
    async def get_all(self) -> list[User]:
        ...
