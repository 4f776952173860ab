"""Integration test fixtures."""
import pytest


@pytest.fixture
def ledger(app):
    """SessionLedgerService wired through the container."""
    return app.container.session_ledger_service()


@pytest.fixture
def reports(app):
    return app.container.session_report_service()
