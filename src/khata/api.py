"""Request handlers independent of any HTTP framework.

Each handler takes an explicitly constructed ``Database`` and the owner the
request acts for, and returns an ``ApiResponse`` whose body is plain
JSON-compatible data. Client mistakes become 400/404 responses carrying the
error message; store failures are logged and reported as a generic 500.
"""

from dataclasses import dataclass, fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Optional

from khata.database.base import Database
from khata.domain.chat import ChatService
from khata.domain.dashboard import DashboardService
from khata.domain.entities import ColumnMapping
from khata.domain.errors import NotFoundError, StoreError, ValidationError
from khata.domain.gst import GSTService
from khata.domain.transaction import TransactionService
from khata.logging_setup import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ApiResponse:
    status: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def to_jsonable(value: Any) -> Any:
    """Convert domain values (dataclasses, Decimals, dates, enums) to JSON types."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


def _error(status: int, message: str) -> ApiResponse:
    return ApiResponse(status, {"error": message})


def _handle(action: str, handler: Callable[[], Any]) -> ApiResponse:
    try:
        return ApiResponse(200, to_jsonable(handler()))
    except NotFoundError as e:
        return _error(404, str(e))
    except StoreError:
        logger.exception("Store failure while trying to %s", action)
        return _error(500, f"Failed to {action}")
    except ValidationError as e:
        return _error(400, str(e))
    except Exception:
        logger.exception("Unexpected failure while trying to %s", action)
        return _error(500, f"Failed to {action}")


def _mapping_from_body(raw: Any) -> Optional[ColumnMapping]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ValidationError("Mapping must be an object")

    unknown = sorted(set(raw) - set(ColumnMapping.field_names()))
    if unknown:
        raise ValidationError(f"Unknown mapping field(s): {', '.join(unknown)}")
    return ColumnMapping(**{key: value or None for key, value in raw.items()})


def get_transactions(db: Database, owner_id: str) -> ApiResponse:
    """List the owner's transactions, newest first."""
    service = TransactionService(db)
    return _handle("fetch transactions", lambda: service.list_transactions(owner_id))


def post_transactions(
    db: Database, owner_id: str, body: Any, today: Optional[date] = None
) -> ApiResponse:
    """Import a batch of raw rows: ``{"transactions": [...], "mapping": {...}}``."""
    service = TransactionService(db)

    def run() -> dict[str, Any]:
        rows = body.get("transactions") if isinstance(body, dict) else None
        if not isinstance(rows, list) or not rows:
            raise ValidationError("No transactions provided")
        if not all(isinstance(row, dict) for row in rows):
            raise ValidationError("Each transaction must be an object")

        mapping = _mapping_from_body(body.get("mapping"))
        result = service.import_rows(owner_id, rows, mapping, today=today)
        return {"success": True, "count": result["imported"], "dropped": result["dropped"]}

    return _handle("create transactions", run)


def delete_transaction(db: Database, owner_id: str, transaction_id: Any) -> ApiResponse:
    """Delete one transaction by id."""
    service = TransactionService(db)

    def run() -> dict[str, bool]:
        if transaction_id is None or transaction_id == "":
            raise ValidationError("Transaction ID required")
        try:
            parsed_id = int(transaction_id)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid transaction ID: {transaction_id}")

        service.delete_transaction(owner_id, parsed_id)
        return {"success": True}

    return _handle("delete transaction", run)


def get_dashboard(db: Database, owner_id: str, today: Optional[date] = None) -> ApiResponse:
    service = DashboardService(db)
    return _handle("fetch dashboard data", lambda: service.build(owner_id, today))


def get_gst(db: Database, owner_id: str, today: Optional[date] = None) -> ApiResponse:
    service = GSTService(db)
    return _handle("fetch GST data", lambda: service.report(owner_id, today))


def post_chat(
    db: Database, owner_id: str, body: Any, today: Optional[date] = None
) -> ApiResponse:
    """Answer ``{"message": "..."}`` with ``{"message": ..., "data": ...}``."""
    service = ChatService(db)

    def run() -> dict[str, Any]:
        message = body.get("message") if isinstance(body, dict) else None
        reply = service.ask(owner_id, message, today=today)
        return {"message": reply.message, "data": reply.data}

    return _handle("process message", run)
