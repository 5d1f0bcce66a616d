"""Transaction domain service."""

from typing import Optional, Sequence
from datetime import date

from khata.database.base import Database
from khata.domain.entities import ColumnMapping, NewTransaction, Transaction
from khata.domain.errors import NotFoundError, ValidationError, transaction_not_found
from khata.domain.gst import GSTService
from khata.domain.import_normalizer import RawRow, normalize_rows
from khata.logging_setup import get_logger

logger = get_logger(__name__)


class TransactionService:
    """Service for managing transactions.

    Every mutation rebuilds the owner's GST summaries before returning, so
    stored summaries always reflect the stored transactions.
    """

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db
        self.gst_service = GSTService(db)

    def list_transactions(
        self,
        owner_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> list[Transaction]:
        """List an owner's transactions, newest first."""
        return self.db.list_transactions(
            owner_id, start_date=start_date, end_date=end_date, limit=limit
        )

    def get_transaction(self, owner_id: str, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID.

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(owner_id, transaction_id)

    def create_transactions(self, owner_id: str, transactions: Sequence[NewTransaction]) -> int:
        """Store a batch of transactions and rebuild GST summaries.

        Args:
            owner_id: Owner of the transactions
            transactions: Validated transactions to store

        Returns:
            Number of transactions stored
        """
        if not transactions:
            return 0
        count = self.db.create_transactions(owner_id, transactions)
        self.gst_service.recompute(owner_id)
        return count

    def import_rows(
        self,
        owner_id: str,
        rows: Sequence[RawRow],
        mapping: Optional[ColumnMapping] = None,
        today: Optional[date] = None,
    ) -> dict[str, int]:
        """Normalize raw rows and store the result.

        Args:
            owner_id: Owner of the transactions
            rows: Raw rows (column name -> value)
            mapping: Optional explicit column mapping
            today: Date substituted for unparseable dates

        Returns:
            Dict with import statistics:
            - imported: number of transactions stored
            - dropped: number of rows without a positive amount

        Raises:
            ValidationError: If no rows are provided
        """
        if not rows:
            raise ValidationError("No transactions provided")

        transactions = normalize_rows(rows, mapping, today=today)
        imported = self.create_transactions(owner_id, transactions)
        logger.info("Imported %d of %d rows for owner %s", imported, len(rows), owner_id)
        return {"imported": imported, "dropped": len(rows) - len(transactions)}

    def delete_transaction(self, owner_id: str, transaction_id: int) -> None:
        """Delete a transaction and rebuild GST summaries.

        Raises:
            NotFoundError: If the transaction doesn't exist for this owner
        """
        if self.db.get_transaction(owner_id, transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        self.db.delete_transaction(owner_id, transaction_id)
        self.gst_service.recompute(owner_id)

    def delete_all(self, owner_id: str) -> int:
        """Delete every transaction of an owner and clear GST summaries."""
        count = self.db.delete_all_transactions(owner_id)
        self.gst_service.recompute(owner_id)
        return count
