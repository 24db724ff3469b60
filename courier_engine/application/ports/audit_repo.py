"""Port interface for the append-only assignment audit log."""

from abc import ABC, abstractmethod

from courier_engine.domain.entities.audit_entry import AssignmentAuditEntry


class AuditRepository(ABC):
    @abstractmethod
    async def append(self, entry: AssignmentAuditEntry) -> None:
        """Append an entry. Entries are never updated or deleted."""
        ...
