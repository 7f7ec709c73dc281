# services/records.py

"""
Typed collections on top of the record store.

Each collection binds one table to its Create / Update / Read models,
checks foreign keys before writing, and stamps server-side fields
(timestamps, initial ticket status).

Deleting a building does not cascade: units, tickets, events and
communications pointing at it are left in place and keep their
condominio_id.
"""

from typing import Dict, FrozenSet, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from core.errors import MalformedResponseError, ValidationFailure
from core.logging_config import get_logger
from core.store import RecordStore, coerce_id
from models.building import BuildingCreate, BuildingRead, BuildingUpdate
from models.communication import CommunicationCreate, CommunicationRead, CommunicationUpdate
from models.common import utc_now_iso
from models.document import DocumentCreate, DocumentRead, DocumentSummary
from models.enums import EntityKind, TicketStatus
from models.event import EventCreate, EventRead, EventUpdate
from models.person import PersonCreate, PersonRead, PersonUpdate
from models.ticket import TicketCreate, TicketRead, TicketUpdate
from models.unit import UnitCreate, UnitRead, UnitUpdate


logger = get_logger("records")


# -----------------------------------------------------
# Table names (as stored in the sheet)
# -----------------------------------------------------
BUILDINGS = "condomini"
UNITS = "immobili"
PEOPLE = "anagrafiche"
TICKETS = "segnalazioni"
DOCUMENTS = "documenti"
EVENTS = "agenda"
COMMUNICATIONS = "comunicazioni"

ALL_TABLES = [BUILDINGS, UNITS, PEOPLE, TICKETS, DOCUMENTS, EVENTS, COMMUNICATIONS]


ReadT = TypeVar("ReadT", bound=BaseModel)


def validation_failure_from(error: ValidationError) -> ValidationFailure:
    """First pydantic error as a ValidationFailure naming the field."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or None
    message = first.get("msg", "Invalid value")
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return ValidationFailure(f"{field}: {message}" if field else message, field=field)


class Collection(Generic[ReadT]):
    table: str
    kind: EntityKind
    create_model: Type[BaseModel]
    update_model: Optional[Type[BaseModel]] = None
    read_model: Type[ReadT]

    # field -> referenced table
    references: Dict[str, str] = {}

    # Fields an update may clear with an explicit null
    nullable: FrozenSet[str] = frozenset()

    def __init__(self, store: RecordStore):
        self.store = store

    # -------------------------------------------------
    # Reads
    # -------------------------------------------------
    def _read(self, record: dict) -> ReadT:
        try:
            return self.read_model.model_validate(record)
        except ValidationError as e:
            logger.error(f"Unreadable row in {self.table}: id={record.get('id')}")
            raise MalformedResponseError(
                f"Record {record.get('id')} in '{self.table}' has an unexpected shape",
                detail=str(e),
            )

    def list(self) -> List[ReadT]:
        return [self._read(row) for row in self.store.select(self.table)]

    def get(self, record_id: int) -> ReadT:
        return self._read(self.store.get(self.table, record_id))

    # -------------------------------------------------
    # Writes
    # -------------------------------------------------
    def parse_create(self, data: dict) -> BaseModel:
        """Raw field map (CSV row, form) → create model."""
        try:
            return self.create_model.model_validate(data)
        except ValidationError as e:
            raise validation_failure_from(e)

    def prepare_create(self, payload: BaseModel) -> dict:
        return payload.model_dump(mode="json")

    def create(self, payload: BaseModel) -> ReadT:
        data = self.prepare_create(payload)
        self.check_references(data)
        return self._read(self.store.insert(self.table, data))

    def update(self, record_id: int, payload: BaseModel) -> ReadT:
        fields = payload.model_dump(mode="json", exclude_unset=True)
        fields.pop("id", None)

        if not fields:
            return self.get(record_id)

        self.check_nulls(fields)
        self.check_references(fields)
        return self._read(self.store.update(self.table, record_id, fields))

    def update_fields(self, record_id: int, fields: dict) -> ReadT:
        """Server-side write of fields clients cannot set directly."""
        return self._read(self.store.update(self.table, record_id, fields))

    def delete(self, record_id: int) -> None:
        self.store.delete(self.table, record_id)

    def check_nulls(self, fields: dict) -> None:
        for field, value in fields.items():
            if value is None and field not in self.nullable:
                raise ValidationFailure(f"{field}: cannot be cleared", field=field)

    # -------------------------------------------------
    # Foreign keys
    # -------------------------------------------------
    def check_references(self, data: dict) -> None:
        known_ids: Dict[str, set] = {}

        for field, table in self.references.items():
            value = data.get(field)
            if value is None:
                continue

            if table not in known_ids:
                known_ids[table] = {coerce_id(row.get("id")) for row in self.store.select(table)}

            if coerce_id(value) not in known_ids[table]:
                raise ValidationFailure(
                    f"{field}: no record {value} in '{table}'",
                    field=field,
                )


# ============================================================
# Concrete collections
# ============================================================

class Buildings(Collection[BuildingRead]):
    table = BUILDINGS
    kind = EntityKind.buildings
    create_model = BuildingCreate
    update_model = BuildingUpdate
    read_model = BuildingRead


class Units(Collection[UnitRead]):
    table = UNITS
    kind = EntityKind.units
    create_model = UnitCreate
    update_model = UnitUpdate
    read_model = UnitRead
    references = {
        "condominio_id": BUILDINGS,
        "owner_id": PEOPLE,
        "tenant_id": PEOPLE,
    }
    nullable = frozenset({"owner_id", "tenant_id"})


class People(Collection[PersonRead]):
    table = PEOPLE
    kind = EntityKind.people
    create_model = PersonCreate
    update_model = PersonUpdate
    read_model = PersonRead
    nullable = frozenset({"telefono"})

    def find_by_email(self, email: str) -> Optional[PersonRead]:
        """First person whose email matches, case-insensitively."""
        wanted = (email or "").strip().lower()
        for person in self.list():
            if person.email and person.email.strip().lower() == wanted:
                return person
        return None


class Tickets(Collection[TicketRead]):
    table = TICKETS
    kind = EntityKind.tickets
    create_model = TicketCreate
    update_model = TicketUpdate
    read_model = TicketRead
    references = {"condominio_id": BUILDINGS}

    def prepare_create(self, payload: BaseModel) -> dict:
        data = super().prepare_create(payload)
        data.update(
            status=TicketStatus.open.value,
            created_at=utc_now_iso(),
            ai_analysis="",
        )
        return data

    def set_analysis(self, record_id: int, analysis: str) -> TicketRead:
        return self.update_fields(record_id, {"ai_analysis": analysis})


class Documents(Collection[DocumentRead]):
    table = DOCUMENTS
    kind = EntityKind.documents
    create_model = DocumentCreate
    read_model = DocumentRead

    def prepare_create(self, payload: BaseModel) -> dict:
        data = super().prepare_create(payload)
        data["data_caricamento"] = utc_now_iso()
        return data

    def summaries(self) -> List[DocumentSummary]:
        return [DocumentSummary.model_validate(doc.model_dump()) for doc in self.list()]


class Events(Collection[EventRead]):
    table = EVENTS
    kind = EntityKind.events
    create_model = EventCreate
    update_model = EventUpdate
    read_model = EventRead
    references = {"condominio_id": BUILDINGS}
    nullable = frozenset({"description", "end_date", "condominio_id"})


class Communications(Collection[CommunicationRead]):
    table = COMMUNICATIONS
    kind = EntityKind.communications
    create_model = CommunicationCreate
    update_model = CommunicationUpdate
    read_model = CommunicationRead
    references = {"condominio_id": BUILDINGS}
    nullable = frozenset({"condominio_id"})

    def prepare_create(self, payload: BaseModel) -> dict:
        data = super().prepare_create(payload)
        data["sent_at"] = utc_now_iso()
        return data


COLLECTIONS: Dict[EntityKind, Type[Collection]] = {
    cls.kind: cls
    for cls in (Buildings, Units, People, Tickets, Documents, Events, Communications)
}


def collection_for(kind: EntityKind, store: RecordStore) -> Collection:
    return COLLECTIONS[kind](store)

