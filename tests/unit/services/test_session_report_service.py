"""Tests for SessionReportService."""
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

from src.models.enums import LedgerEntryType, SessionStatus


def _make_session(room="101", base_price="100000", entries=()):
    from src.models.ledger_entry import LedgerEntry
    from src.models.service_session import ServiceSession

    session = ServiceSession(
        id=uuid4(),
        model_id="model-1",
        model_name="Ana",
        location_kind="Sede",
        room=room,
        duration_category="1 hora",
        duration_minutes=60,
        base_price=Decimal(base_price),
        payment_method="Efectivo",
        status=SessionStatus.FINALIZED.value,
        started_at=datetime(2026, 3, 1, 20, 0),
        ended_at=datetime(2026, 3, 1, 21, 0),
    )
    for entry_type, description, cost, product_id in entries:
        session.entries.append(LedgerEntry(
            entry_type=entry_type,
            description=description,
            cost=Decimal(cost),
            quantity=1,
            product_id=product_id,
        ))
    return session


class TestRoomOccupancy:
    """Tests for SessionReportService.room_occupancy()."""

    def test_marks_occupied_rooms(self):
        from src.services.session_report_service import SessionReportService

        busy = _make_session(room="102")
        repo = MagicMock()
        repo.find_active.return_value = [busy]
        service = SessionReportService(repo, rooms=["101", "102"])

        result = service.room_occupancy()

        assert result[0] == {
            "room": "101", "occupied": False, "session_id": None, "model_name": None,
        }
        assert result[1]["occupied"] is True
        assert result[1]["session_id"] == str(busy.id)


class TestStats:
    """Tests for daily and monthly stats."""

    def test_summarize_counts_boutique_units(self):
        from src.services.session_report_service import SessionReportService

        product = uuid4()
        sessions = [
            _make_session(entries=[
                (LedgerEntryType.ADD_ON, "Cerveza (x2)", "24000", product),
                (LedgerEntryType.ADD_ON, "Propina", "20000", None),
            ]),
            _make_session(base_price="50000", entries=[
                (LedgerEntryType.ADD_ON, "Agua (x1)", "6000", product),
                (LedgerEntryType.TIME_EXTENSION, "Extra time (30 minutos)", "80000", None),
            ]),
        ]

        revenue, products_sold, boutique_sales = SessionReportService.summarize(sessions)

        assert revenue == Decimal("280000")
        assert products_sold == 3
        assert boutique_sales == Decimal("30000")

    def test_daily_stats_queries_one_day(self):
        from src.services.session_report_service import SessionReportService

        repo = MagicMock()
        repo.find_finalized_between.return_value = [_make_session()]
        service = SessionReportService(repo)

        stats = service.daily_stats(date(2026, 3, 1))

        repo.find_finalized_between.assert_called_once_with(
            datetime(2026, 3, 1), datetime(2026, 3, 2)
        )
        assert stats["services"] == 1
        assert stats["revenue"] == "100000"

    def test_monthly_stats_covers_whole_month(self):
        from src.services.session_report_service import SessionReportService

        repo = MagicMock()
        repo.find_finalized_between.return_value = []
        service = SessionReportService(repo)

        stats = service.monthly_stats(2026, 2)

        repo.find_finalized_between.assert_called_once_with(
            datetime(2026, 2, 1), datetime(2026, 3, 1)
        )
        assert stats["services"] == 0
        assert stats["revenue"] == "0"


class TestModelRevenue:
    """Tests for SessionReportService.model_revenue()."""

    def test_range_is_inclusive_and_filtered_by_model(self):
        from src.services.session_report_service import SessionReportService

        repo = MagicMock()
        repo.find_finalized_between.return_value = [
            _make_session(),
            _make_session(
                base_price="80000",
                entries=[(LedgerEntryType.ADD_ON, "Agua (x2)", "12000", uuid4())],
            ),
        ]
        service = SessionReportService(repo)

        result = service.model_revenue("model-1", date(2026, 3, 1), date(2026, 3, 31))

        repo.find_finalized_between.assert_called_once_with(
            datetime(2026, 3, 1), datetime(2026, 4, 1), model_id="model-1"
        )
        assert result["services"] == 2
        assert result["revenue"] == "192000"
        assert result["products_sold"] == 2
        assert result["from"] == "2026-03-01"
        assert result["to"] == "2026-03-31"
        assert [s["total_cost"] for s in result["sessions"]] == ["92000", "100000"]

    def test_open_range(self):
        from src.services.session_report_service import SessionReportService

        repo = MagicMock()
        repo.find_finalized_between.return_value = []
        service = SessionReportService(repo)

        result = service.model_revenue("model-9")

        repo.find_finalized_between.assert_called_once_with(None, None, model_id="model-9")
        assert result["revenue"] == "0"
        assert result["sessions"] == []
