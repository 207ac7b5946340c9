import logging
import re
from collections.abc import Iterable, Mapping
from threading import Lock

from pydantic import ValidationError

from pharmacy.core.errors import InvalidArgument, NotFound
from pharmacy.schemas.medicine import Medicine, MedicineIn

logger = logging.getLogger("medicines")

UNAVAILABLE_ID = "Unavailable ID"
NOT_FOUND = "Medicine is not exist."
# ASCII digits only: no padding, underscores or non-Latin numerals.
ID_PATTERN = re.compile(r"[+-]?[0-9]+")

SEED_MEDICINES = (
    Medicine(id=1, name="ABC", manufacturer="1234", price=15.5, stock=100),
    Medicine(id=2, name="EFG", manufacturer="5678", price=12.0, stock=50),
    Medicine(id=3, name="XYZ", manufacturer="9999", price=5.8, stock=200),
)

Payload = MedicineIn | Mapping | str | bytes


def parse_medicine_id(raw_id: str | int) -> int:
    if isinstance(raw_id, bool):
        raise InvalidArgument(UNAVAILABLE_ID)
    if isinstance(raw_id, int):
        return raw_id
    if not isinstance(raw_id, str) or not ID_PATTERN.fullmatch(raw_id):
        raise InvalidArgument(UNAVAILABLE_ID)
    return int(raw_id)


def parse_payload(payload: Payload) -> MedicineIn:
    if isinstance(payload, MedicineIn):
        return payload
    try:
        if isinstance(payload, (str, bytes)):
            return MedicineIn.model_validate_json(payload)
        return MedicineIn.model_validate(payload)
    except ValidationError as exc:
        raise InvalidArgument(_describe(exc)) from None


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    if location:
        return f"{location}: {first['msg']}"
    return first["msg"]


class MedicineStore:
    """Ordered, lock-guarded collection of medicine records.

    Ids come from a counter that only moves forward, so a deleted id is never
    handed out again.
    """

    def __init__(self, medicines: Iterable[Medicine] = ()) -> None:
        self._lock = Lock()
        self._medicines: list[Medicine] = [m.model_copy() for m in medicines]
        ids = [m.id for m in self._medicines]
        if len(ids) != len(set(ids)):
            raise ValueError("Medicine ids must be unique")
        self._next_id = max(ids, default=0) + 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._medicines)

    def list_all(self) -> list[Medicine]:
        with self._lock:
            return [m.model_copy() for m in self._medicines]

    def get(self, raw_id: str | int) -> Medicine:
        medicine_id = parse_medicine_id(raw_id)
        with self._lock:
            index = self._index_of(medicine_id)
            return self._medicines[index].model_copy()

    def create(self, payload: Payload) -> Medicine:
        data = parse_payload(payload)
        with self._lock:
            medicine = Medicine(id=self._next_id, **data.model_dump(exclude={"id"}))
            self._next_id += 1
            self._medicines.append(medicine)
        logger.info("medicine_created", extra={"event": {"medicine_id": medicine.id}})
        return medicine.model_copy()

    def update(self, raw_id: str | int, payload: Payload) -> Medicine:
        medicine_id = parse_medicine_id(raw_id)
        data = parse_payload(payload)
        with self._lock:
            index = self._index_of(medicine_id)
            medicine = Medicine(id=medicine_id, **data.model_dump(exclude={"id"}))
            self._medicines[index] = medicine
        logger.info("medicine_updated", extra={"event": {"medicine_id": medicine_id}})
        return medicine.model_copy()

    def delete(self, raw_id: str | int) -> None:
        medicine_id = parse_medicine_id(raw_id)
        with self._lock:
            index = self._index_of(medicine_id)
            del self._medicines[index]
        logger.info("medicine_deleted", extra={"event": {"medicine_id": medicine_id}})

    def _index_of(self, medicine_id: int) -> int:
        # Caller holds the lock.
        for index, medicine in enumerate(self._medicines):
            if medicine.id == medicine_id:
                return index
        raise NotFound(NOT_FOUND, medicine_id=medicine_id)
