"""Shared pytest fixtures for bankledger tests."""

import tempfile
import os
from datetime import date
from pathlib import Path
import pytest

from bankledger.database.factories import create_sqlite_database
from bankledger.domain.account import AccountService
from bankledger.domain.classification import ClassificationEngine
from bankledger.domain.company import CompanyService
from bankledger.domain.fiscal_period import FiscalPeriodService
from bankledger.domain.mapping_rules import MappingRuleService
from bankledger.domain.statement_import import StatementImportService
from bankledger.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def company_service(temp_db):
    """Create a CompanyService with a temporary database."""
    return CompanyService(temp_db)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def rule_service(temp_db):
    """Create a MappingRuleService with a temporary database."""
    return MappingRuleService(temp_db)


@pytest.fixture
def period_service(temp_db):
    """Create a FiscalPeriodService with a temporary database."""
    return FiscalPeriodService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def import_service(temp_db):
    """Create a StatementImportService with a temporary database."""
    return StatementImportService(temp_db)


@pytest.fixture
def engine(temp_db):
    """Create a ClassificationEngine with a temporary database."""
    return ClassificationEngine(temp_db)


@pytest.fixture
def sample_company(company_service):
    """Create a sample company for testing."""
    company_id = company_service.create_company("Acme Trading")
    return company_service.get_company(company_id)


@pytest.fixture
def sample_period(period_service, sample_company):
    """Create the FY2023 fiscal period (March 2023 to February 2024)."""
    period_id = period_service.create_period(
        sample_company.id, "FY2023", date(2023, 3, 1), date(2024, 2, 29)
    )
    return period_service.get_period(period_id)


@pytest.fixture
def standard_chart(account_service, rule_service, sample_company):
    """Install the standard chart of accounts and rules for the sample company."""
    account_service.install_standard_chart(sample_company.id)
    rule_service.install_standard_rules(sample_company.id)
    return sample_company


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def load_fixture(fixtures_dir):
    """Read a statement fixture as a tuple of lines."""

    def _load(name: str) -> tuple[str, ...]:
        return tuple((fixtures_dir / name).read_text(encoding="utf-8").splitlines())

    return _load
