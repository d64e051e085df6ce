"""Port interface for ticket transactions."""

from abc import ABC, abstractmethod

from repshield.domain.entities.transaction import Transaction


class TransactionRepository(ABC):
    @abstractmethod
    async def save(self, transaction: Transaction) -> Transaction:
        ...

    @abstractmethod
    async def get_by_ticket(self, ticket_id: int) -> list[Transaction]:
        ...
