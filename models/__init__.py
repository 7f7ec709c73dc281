# -------------------------
# Building Models
# -------------------------
from .building import (
    BuildingBase,
    BuildingCreate,
    BuildingRead,
    BuildingUpdate,
)

# -------------------------
# Unit Models
# -------------------------
from .unit import (
    UnitBase,
    UnitCreate,
    UnitRead,
    UnitUpdate,
)

# -------------------------
# People Models
# -------------------------
from .person import (
    PersonBase,
    PersonCreate,
    PersonRead,
    PersonUpdate,
)

# -------------------------
# Ticket Models
# -------------------------
from .ticket import (
    TicketBase,
    TicketCreate,
    TicketRead,
    TicketUpdate,
    TicketStatusUpdate,
)

# -------------------------
# Document Models
# -------------------------
from .document import (
    DocumentBase,
    DocumentCreate,
    DocumentRead,
    DocumentSummary,
)

# -------------------------
# Agenda Models
# -------------------------
from .event import (
    EventBase,
    EventCreate,
    EventRead,
    EventUpdate,
)

# -------------------------
# Communication Models
# -------------------------
from .communication import (
    CommunicationBase,
    CommunicationCreate,
    CommunicationRead,
    CommunicationUpdate,
    CommunicationDraft,
    DraftRequest,
)

# -------------------------
# Enums
# -------------------------
from .enums import (
    Role,
    View,
    EntityKind,
    PersonRole,
    TicketPriority,
    TicketStatus,
    DocumentCategory,
    EventCategory,
    CommunicationTone,
)

# -------------------------
# Auth Models
# -------------------------
from .auth import (
    Capabilities,
    LoginRequest,
    ProfileUpdate,
    ProfileUpdateResponse,
    Session,
    TokenResponse,
)

__all__ = [
    # buildings
    "BuildingBase",
    "BuildingCreate",
    "BuildingRead",
    "BuildingUpdate",

    # units
    "UnitBase",
    "UnitCreate",
    "UnitRead",
    "UnitUpdate",

    # people
    "PersonBase",
    "PersonCreate",
    "PersonRead",
    "PersonUpdate",

    # tickets
    "TicketBase",
    "TicketCreate",
    "TicketRead",
    "TicketUpdate",
    "TicketStatusUpdate",

    # documents
    "DocumentBase",
    "DocumentCreate",
    "DocumentRead",
    "DocumentSummary",

    # agenda
    "EventBase",
    "EventCreate",
    "EventRead",
    "EventUpdate",

    # communications
    "CommunicationBase",
    "CommunicationCreate",
    "CommunicationRead",
    "CommunicationUpdate",
    "CommunicationDraft",
    "DraftRequest",

    # enums
    "Role",
    "View",
    "EntityKind",
    "PersonRole",
    "TicketPriority",
    "TicketStatus",
    "DocumentCategory",
    "EventCategory",
    "CommunicationTone",

    # auth
    "Capabilities",
    "LoginRequest",
    "ProfileUpdate",
    "ProfileUpdateResponse",
    "Session",
    "TokenResponse",
]
