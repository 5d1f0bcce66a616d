"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from datetime import date

# Import entities directly to avoid circular import through domain/__init__.py
from khata.domain.entities import GSTSummary, NewTransaction, Transaction


class Database(ABC):
    """Abstract database interface for khata.

    Every data operation is scoped to an owner (the business whose books
    are being kept).
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transactions(self, owner_id: str, transactions: Sequence[NewTransaction]) -> int:
        """Insert a batch of transactions. Returns the number inserted."""
        pass

    @abstractmethod
    def get_transaction(self, owner_id: str, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def delete_transaction(self, owner_id: str, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def delete_all_transactions(self, owner_id: str) -> int:
        """Delete every transaction of an owner. Returns the number deleted."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        owner_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        gst_only: bool = False,
        limit: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions, newest first.

        Args:
            owner_id: Owner to list transactions for
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            gst_only: If True, only return transactions carrying a GST rate
            limit: Optional maximum number of rows
        """
        pass

    # GST summary operations
    @abstractmethod
    def replace_gst_summaries(self, owner_id: str, summaries: Sequence[GSTSummary]) -> None:
        """Replace all stored GST summaries of an owner in one transaction.

        Periods not present in ``summaries`` are removed.
        """
        pass

    @abstractmethod
    def list_gst_summaries(self, owner_id: str) -> list[GSTSummary]:
        """List stored GST summaries, newest period first."""
        pass

    @abstractmethod
    def get_gst_summary(self, owner_id: str, period: str) -> Optional[GSTSummary]:
        """Get the stored GST summary for a ``YYYY-MM`` period."""
        pass
