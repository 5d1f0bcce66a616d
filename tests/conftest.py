"""Shared pytest fixtures for khata tests."""

import logging
import tempfile
import os
from datetime import date
from decimal import Decimal
from pathlib import Path
import pytest

from khata import logging_setup
from khata.database.factories import create_sqlite_database
from khata.domain.entities import GSTType, NewTransaction, TransactionType
from khata.domain.gst import GSTService
from khata.domain.transaction import TransactionService

TODAY = date(2024, 3, 15)


def _reset_package_logger():
    logger = logging.getLogger("khata")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    logging_setup._CONFIGURED = False
    return logger


@pytest.fixture(autouse=True)
def clean_logging():
    """Give every test an unconfigured package logger.

    The CLI configures logging once per process; without a reset its handler
    (bound to a finished CliRunner stream) leaks into later tests.
    """
    yield _reset_package_logger()
    _reset_package_logger()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def owner():
    """Owner id used by most tests."""
    return "acme"


@pytest.fixture
def today():
    """Fixed reference date (mid March 2024)."""
    return TODAY


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def gst_service(temp_db):
    """Create a GSTService with a temporary database."""
    return GSTService(temp_db)


def make_transaction(
    amount="1000",
    txn_type=TransactionType.EXPENSE,
    category="Other Expense",
    txn_date=TODAY,
    description="Test transaction",
    gst_rate=None,
    gst_type=None,
    tds_section=None,
    tds_rate=None,
    **kwargs,
) -> NewTransaction:
    """Build a NewTransaction with sensible defaults.

    A GST rate without an explicit type defaults to CGST + SGST.
    """
    if gst_rate is not None:
        gst_rate = Decimal(str(gst_rate))
        gst_type = gst_type or GSTType.CGST_SGST
    if tds_rate is not None:
        tds_rate = Decimal(str(tds_rate))
    return NewTransaction(
        date=txn_date,
        description=description,
        amount=Decimal(str(amount)),
        type=txn_type,
        category=category,
        gst_rate=gst_rate,
        gst_type=gst_type,
        tds_section=tds_section,
        tds_rate=tds_rate,
        **kwargs,
    )


@pytest.fixture
def new_transaction():
    """Factory fixture for NewTransaction objects."""
    return make_transaction


@pytest.fixture
def sample_ledger(transaction_service, owner):
    """Store a small ledger spanning February and March 2024."""
    transactions = [
        make_transaction(
            "118000", TransactionType.INCOME, "Sales", date(2024, 3, 5),
            "Invoice 101", gst_rate=18,
        ),
        make_transaction(
            "100000", TransactionType.EXPENSE, "Rent", date(2024, 3, 1),
            "Office rent March", tds_section="194I", tds_rate=10,
        ),
        make_transaction(
            "11800", TransactionType.EXPENSE, "Software", date(2024, 3, 10),
            "AWS subscription", gst_rate=18, gst_type=GSTType.IGST,
        ),
        make_transaction(
            "52500", TransactionType.INCOME, "Services", date(2024, 2, 20),
            "Consulting fee", gst_rate=5,
        ),
        make_transaction(
            "20000", TransactionType.EXPENSE, "Rent", date(2024, 2, 1),
            "Office rent February",
        ),
    ]
    transaction_service.create_transactions(owner, transactions)
    return transactions


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
