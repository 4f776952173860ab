"""Occupancy and revenue reports over service sessions."""
import calendar
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from src.models.service_session import ServiceSession
from src.repositories.service_session_repository import ServiceSessionRepository


class SessionReportService:
    """
    Read-only reporting on top of the session repository.

    Stats only count finalized sessions; their totals are recomputed from
    the ledgers on every call.
    """

    def __init__(
        self,
        session_repo: ServiceSessionRepository,
        rooms: Optional[Sequence[str]] = None,
    ):
        self._session_repo = session_repo
        self._rooms = list(rooms) if rooms else []

    def room_occupancy(self) -> List[Dict]:
        """List each configured room with the active session using it, if any."""
        by_room = {s.room: s for s in self._session_repo.find_active() if s.room}
        result = []
        for room in self._rooms:
            session = by_room.get(room)
            result.append({
                "room": room,
                "occupied": session is not None,
                "session_id": str(session.id) if session else None,
                "model_name": session.model_name if session else None,
            })
        return result

    def daily_stats(self, day: Optional[date] = None) -> Dict:
        """Stats for sessions finalized on one calendar day."""
        day = day or datetime.utcnow().date()
        start = datetime(day.year, day.month, day.day)
        return self._stats(start, start + timedelta(days=1))

    def monthly_stats(self, year: Optional[int] = None, month: Optional[int] = None) -> Dict:
        """Stats for sessions finalized in one calendar month."""
        today = datetime.utcnow().date()
        year = year or today.year
        month = month or today.month
        days = calendar.monthrange(year, month)[1]
        start = datetime(year, month, 1)
        return self._stats(start, start + timedelta(days=days))

    def model_revenue(
        self,
        model_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Dict:
        """
        Services and revenue of one model over an optional date range.

        Args:
            model_id: Model whose finalized services are counted
            start: First day included (open when omitted)
            end: Last day included (open when omitted)

        Returns:
            Dict with the model's services, newest first, and the totals
        """
        lower = datetime(start.year, start.month, start.day) if start else None
        upper = (
            datetime(end.year, end.month, end.day) + timedelta(days=1) if end else None
        )
        sessions = self._session_repo.find_finalized_between(
            lower, upper, model_id=model_id
        )
        revenue, products_sold, boutique_sales = self.summarize(sessions)
        return {
            "model_id": model_id,
            "from": start.isoformat() if start else None,
            "to": end.isoformat() if end else None,
            "services": len(sessions),
            "revenue": str(revenue),
            "products_sold": products_sold,
            "boutique_sales": str(boutique_sales),
            "sessions": [
                {
                    "id": str(s.id),
                    "ended_at": s.ended_at.isoformat() if s.ended_at else None,
                    "duration_category": s.duration_category,
                    "total_cost": str(s.total_cost),
                }
                for s in reversed(sessions)
            ],
        }

    def _stats(self, start: datetime, end: datetime) -> Dict:
        sessions = self._session_repo.find_finalized_between(start, end)
        revenue, products_sold, boutique_sales = self.summarize(sessions)
        return {
            "from": start.isoformat(),
            "to": end.isoformat(),
            "services": len(sessions),
            "revenue": str(revenue),
            "products_sold": products_sold,
            "boutique_sales": str(boutique_sales),
        }

    @staticmethod
    def summarize(sessions: Sequence[ServiceSession]) -> Tuple[Decimal, int, Decimal]:
        """
        Aggregate a list of sessions.

        Returns:
            Tuple of (revenue, boutique units sold, boutique revenue)
        """
        revenue = Decimal("0")
        products_sold = 0
        boutique_sales = Decimal("0")
        for session in sessions:
            revenue += session.total_cost
            for entry in session.add_ons:
                if entry.is_boutique:
                    products_sold += _units_of(entry.description)
                    boutique_sales += entry.line_total
        return revenue, products_sold, boutique_sales


def _units_of(description: str) -> int:
    # Boutique lines are written as "<name> (x<qty>)"
    if description.endswith(")") and "(x" in description:
        qty = description.rsplit("(x", 1)[1][:-1]
        if qty.isdigit():
            return int(qty)
    return 1
