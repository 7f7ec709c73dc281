from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# SESSION ROLE
# -----------------------------------------------------
class Role(BaseStrEnum):
    """Role carried by a session; drives every capability check."""

    admin = "admin"
    manager = "manager"
    user = "user"


# -----------------------------------------------------
# VIEWS
# -----------------------------------------------------
class View(BaseStrEnum):
    """Screens of the management UI."""

    dashboard = "dashboard"
    buildings = "buildings"
    units = "units"
    people = "people"
    tickets = "tickets"
    communications = "communications"
    documents = "documents"
    agenda = "agenda"
    profile = "profile"


# -----------------------------------------------------
# ENTITY KINDS (one per collection)
# -----------------------------------------------------
class EntityKind(BaseStrEnum):
    buildings = "buildings"
    units = "units"
    people = "people"
    tickets = "tickets"
    documents = "documents"
    events = "events"
    communications = "communications"


# -----------------------------------------------------
# PERSON ROLE
# -----------------------------------------------------
class PersonRole(BaseStrEnum):
    owner = "owner"
    tenant = "tenant"


# -----------------------------------------------------
# TICKET PRIORITY / STATUS
# -----------------------------------------------------
class TicketPriority(BaseStrEnum):
    low = "low"
    medium = "medium"
    high = "high"


class TicketStatus(BaseStrEnum):
    open = "open"
    in_progress = "in_progress"
    resolved = "resolved"


# -----------------------------------------------------
# DOCUMENT CATEGORY
# -----------------------------------------------------
class DocumentCategory(BaseStrEnum):
    """Stored values are the historical Italian ones."""

    contract = "contratto"
    notice = "avviso"
    minutes = "verbale"
    other = "altro"


# -----------------------------------------------------
# EVENT CATEGORY
# -----------------------------------------------------
class EventCategory(BaseStrEnum):
    """Stored values are the historical Italian ones."""

    assembly = "assemblea"
    maintenance = "manutenzione"
    deadline = "scadenza"
    other = "altro"


# -----------------------------------------------------
# COMMUNICATION TONE (AI drafting)
# -----------------------------------------------------
class CommunicationTone(BaseStrEnum):
    formal = "formal"
    friendly = "friendly"
    urgent = "urgent"
