"""CSV import domain service."""

import csv
from datetime import date
from pathlib import Path
from typing import Any, Optional

from khata.database.base import Database
from khata.domain.entities import ColumnMapping
from khata.domain.errors import ValidationError
from khata.domain.import_normalizer import detect_columns
from khata.domain.transaction import TransactionService


class CSVImportService:
    """Service for importing CSV exports from banks and accounting tools."""

    def __init__(self, db: Database):
        """Initialize CSV import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transaction_service = TransactionService(db)

    def read_rows(self, csv_file_path: str) -> tuple[list[str], list[dict[str, str]]]:
        """Read a CSV file into raw rows.

        Args:
            csv_file_path: Path to CSV file

        Returns:
            Tuple of (headers, rows)

        Raises:
            FileNotFoundError: If CSV file doesn't exist
            ValidationError: If the file has no header row
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            # Try to detect delimiter
            sample = f.read(1024)
            f.seek(0)
            try:
                delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t|").delimiter
            except csv.Error:
                delimiter = ","

            reader = csv.DictReader(f, delimiter=delimiter)
            if not reader.fieldnames:
                raise ValidationError("CSV file has no columns")

            headers = [name.strip() for name in reader.fieldnames if name]
            rows = []
            for row in reader:
                rows.append(
                    {
                        (key or "").strip(): (value or "").strip()
                        for key, value in row.items()
                        if key is not None and isinstance(value, str)
                    }
                )

        return headers, rows

    def import_csv(
        self,
        owner_id: str,
        csv_file_path: str,
        mapping: Optional[ColumnMapping] = None,
        today: Optional[date] = None,
    ) -> dict[str, Any]:
        """Import transactions from a CSV file.

        Args:
            owner_id: Owner of the imported transactions
            csv_file_path: Path to CSV file
            mapping: Optional explicit column mapping; gaps are auto-detected
            today: Date substituted for unparseable dates

        Returns:
            Dict with import statistics:
            - imported: number of transactions stored
            - dropped: rows skipped for lacking a positive amount
            - mapping: the column mapping that was applied

        Raises:
            FileNotFoundError: If CSV file doesn't exist
            ValidationError: If the file has no rows or no amount column
        """
        headers, rows = self.read_rows(csv_file_path)
        if not rows:
            raise ValidationError("No transactions provided")

        detected = detect_columns(headers)
        resolved = mapping.merged_with(detected) if mapping is not None else detected
        if resolved.amount is None:
            raise ValidationError(
                f"Could not find an amount column in: {', '.join(headers)}"
            )

        result = self.transaction_service.import_rows(owner_id, rows, resolved, today=today)
        result["mapping"] = resolved
        return result
