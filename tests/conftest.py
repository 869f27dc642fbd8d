"""Shared pytest fixtures for budgetbook tests."""

import os
import tempfile
from decimal import Decimal

import pytest

from budgetbook.database.factories import create_sqlite_database
from budgetbook.domain.category import CategoryService
from budgetbook.domain.entities import ItemKind, LineItemDraft, OwnerContext, ValuationMode
from budgetbook.domain.line_item import LineItemService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def owner():
    """Owner scoped by user only."""
    return OwnerContext(user_id="alice")


@pytest.fixture
def other_owner():
    """A second user whose data must stay invisible to ``owner``."""
    return OwnerContext(user_id="bob")


@pytest.fixture
def line_item_service(temp_db):
    """Create a LineItemService with a temporary database."""
    return LineItemService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def make_item(temp_db, owner):
    """Insert a line item directly and return it as a domain entity."""

    def _make(name="Item", amount="10.00", kind=ItemKind.EXPENSE, period="2025-03", **fields):
        draft = LineItemDraft(kind=kind, name=name, amount=Decimal(amount), period=period, **fields)
        item_id = temp_db.insert(owner, draft)
        return temp_db.find_by_id(owner, item_id)

    return _make


@pytest.fixture
def sample_group(make_item):
    """Sum-mode expense group with two children (100.00 and 50.50)."""
    group = make_item(name="Credit card", amount="0", is_group=True, valuation_mode=ValuationMode.SUM)
    make_item(name="Groceries", amount="100.00", parent_id=group.id)
    make_item(name="Fuel", amount="50.50", parent_id=group.id)
    return group


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
