# services/dashboard.py

from typing import List

from pydantic import BaseModel

from core.store import RecordStore
from models.common import parse_timestamp
from models.enums import TicketStatus
from models.ticket import TicketRead
from services.records import Buildings, Tickets


RECENT_TICKETS = 5


class DashboardStats(BaseModel):
    buildings: int
    active_tickets: int
    resolved_tickets: int
    recent_tickets: List[TicketRead]


def build_dashboard(store: RecordStore) -> DashboardStats:
    """Counts for the staff dashboard plus the latest tickets."""
    buildings = Buildings(store).list()
    tickets = Tickets(store).list()

    resolved = [t for t in tickets if t.status == TicketStatus.resolved]
    recent = sorted(tickets, key=lambda t: parse_timestamp(t.created_at), reverse=True)

    return DashboardStats(
        buildings=len(buildings),
        active_tickets=len(tickets) - len(resolved),
        resolved_tickets=len(resolved),
        recent_tickets=recent[:RECENT_TICKETS],
    )
