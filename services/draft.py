# services/draft.py
"""
In-memory application draft.

The draft is what the three-step form edits before anything is written
to the database: typed sections of scalar answers, three repeatable
record lists (education / referees / work) and the attachment slots.
Keys used by the API and in the stored payload are the form keys
("firstName", "permCity", "acad_country", ...); every section knows which
keys it owns, so an unknown key is refused instead of silently stored.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, fields, asdict
from typing import Any, Callable, ClassVar, Dict, Iterator, List

from services.attachments import FileSlot, MAX_FILE_BYTES, new_slots
from services.errors import FloorReached, PortalError, UnknownField, UnknownSlot


def _as_text(key: str, value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, dict)):
        raise PortalError(f"{key} must be a string")
    return str(value)


def _as_bool(key: str, value: Any) -> bool:
    """Real booleans, or the strings "true" / "false"."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise PortalError(f"{key} must be true or false", field=key)


def _as_list(key: str, value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [x.strip() for x in value.split(",") if x.strip()]
    if not isinstance(value, (list, tuple)):
        raise PortalError(f"{key} must be a list")
    return [str(x) for x in value]


# ================= sections =================

class Section:
    # attribute name -> payload key
    KEYS: ClassVar[Dict[str, str]] = {}

    @classmethod
    def owns(cls, key: str) -> bool:
        return key in cls.KEYS.values()

    def _attr_for(self, key: str) -> str:
        for attr, k in self.KEYS.items():
            if k == key:
                return attr
        raise UnknownField(f"Unknown field: {key}", field=key)

    def coerce(self, key: str, value: Any) -> Any:
        """Convert to the type of the current value; raises before anything is written."""
        current = getattr(self, self._attr_for(key))
        if isinstance(current, bool):
            return _as_bool(key, value)
        if isinstance(current, list):
            return _as_list(key, value)
        return _as_text(key, value)

    def set(self, key: str, value: Any):
        setattr(self, self._attr_for(key), self.coerce(key, value))

    def get(self, key: str) -> Any:
        return getattr(self, self._attr_for(key))

    def to_payload(self) -> Dict[str, Any]:
        return {k: getattr(self, attr) for attr, k in self.KEYS.items()}


@dataclass
class Personal(Section):
    first_name: str = ""
    family_name: str = ""
    email: str = ""
    mobile: str = ""
    dob: str = ""
    gender: str = ""
    nationality: str = ""
    country_birth: str = ""
    native_lang: str = ""
    passport_name: str = ""
    passport_issue_loc: str = ""
    passport_number: str = ""
    passport_issue_date: str = ""
    passport_expiry_date: str = ""

    KEYS: ClassVar[Dict[str, str]] = {
        "first_name": "firstName",
        "family_name": "familyName",
        "email": "email",
        "mobile": "mobile",
        "dob": "dob",
        "gender": "gender",
        "nationality": "nationality",
        "country_birth": "countryBirth",
        "native_lang": "nativeLang",
        "passport_name": "passportName",
        "passport_issue_loc": "passportIssueLoc",
        "passport_number": "passportNumber",
        "passport_issue_date": "passportIssueDate",
        "passport_expiry_date": "passportExpiryDate",
    }


ADDRESS_PARTS = ("country", "city", "add1", "add2", "post", "state")


@dataclass
class Address(Section):
    country: str = ""
    city: str = ""
    add1: str = ""
    add2: str = ""
    post: str = ""
    state: str = ""


class PermanentAddress(Address):
    KEYS: ClassVar[Dict[str, str]] = {p: f"perm{p.capitalize()}" for p in ADDRESS_PARTS}


class CurrentAddress(Address):
    KEYS: ClassVar[Dict[str, str]] = {p: f"curr{p.capitalize()}" for p in ADDRESS_PARTS}


@dataclass
class Destination(Section):
    dest_countries: List[str] = None
    study_level: str = ""
    discipline: str = ""
    programme: str = ""
    academic_start: str = ""
    academic_location: str = ""
    applied_remain: str = "No"
    visa_needed: List[str] = None
    visa_refused: str = "No"

    KEYS: ClassVar[Dict[str, str]] = {
        "dest_countries": "destCountries",
        "study_level": "studyLevel",
        "discipline": "discipline",
        "programme": "programme",
        "academic_start": "academicStart",
        "academic_location": "academicLocation",
        "applied_remain": "appliedRemain",
        "visa_needed": "visaNeeded",
        "visa_refused": "visaRefused",
    }

    def __post_init__(self):
        self.dest_countries = list(self.dest_countries or [])
        self.visa_needed = list(self.visa_needed or [])


@dataclass
class EnglishAndStay(Section):
    english_first: str = "No"
    eng_test_type: str = ""
    eng_score: str = ""
    eng_date: str = ""
    accom: str = "No"

    KEYS: ClassVar[Dict[str, str]] = {
        "english_first": "englishFirst",
        "eng_test_type": "engTestType",
        "eng_score": "engScore",
        "eng_date": "engDate",
        "accom": "accom",
    }


@dataclass
class Declarations(Section):
    dec1: bool = False
    dec2: bool = False
    dec3: bool = False

    KEYS: ClassVar[Dict[str, str]] = {"dec1": "dec1", "dec2": "dec2", "dec3": "dec3"}


# ================= repeatable records =================

@dataclass
class Education:
    acad_country: str = ""
    acad_institution: str = ""
    acad_course: str = ""
    acad_level: str = ""
    acad_start: str = ""
    acad_end: str = ""
    acad_fulltime: str = ""
    acad_score: str = ""
    acad_current: str = "No"


@dataclass
class Referee:
    ref_name: str = ""
    ref_position: str = ""
    ref_title: str = ""
    ref_email: str = ""
    ref_known: str = ""
    ref_contact: str = ""
    ref_relation: str = ""
    ref_inst: str = ""
    ref_inst_addr: str = ""


@dataclass
class Work:
    work_title: str = ""
    work_org: str = ""
    work_addr: str = ""
    work_desc: str = ""
    work_ref: str = ""
    work_ref_email: str = ""
    work_start: str = ""
    work_end: str = ""
    work_current: str = "No"


class RecordList:
    """Ordered list of identical records; index is the record's identity."""

    def __init__(self, factory: Callable[[], Any], floor: int = 0):
        self.factory = factory
        self.floor = floor
        self.items: List[Any] = [factory() for _ in range(floor)]

    def __len__(self):
        return len(self.items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)

    def __getitem__(self, index: int):
        return self.items[index]

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in fields(self.factory)]

    def _check_index(self, index: int):
        if index < 0 or index >= len(self.items):
            raise IndexError(f"no record at index {index}")

    def append(self):
        rec = self.factory()
        self.items.append(rec)
        return rec

    def update(self, index: int, field: str, value: Any):
        self._check_index(index)
        if field not in self.field_names:
            raise UnknownField(f"Unknown field: {field}", field=field)
        setattr(self.items[index], field, _as_text(field, value))

    def remove(self, index: int):
        self._check_index(index)
        if len(self.items) <= self.floor:
            raise FloorReached(f"At least {self.floor} record(s) required", floor=self.floor)
        return self.items.pop(index)

    def clear(self):
        self.items = []

    def columns(self) -> Dict[str, List[str]]:
        """Parallel arrays: one list per field, same index across fields."""
        return {name: [getattr(r, name) for r in self.items] for name in self.field_names}

    def to_list(self) -> List[Dict[str, Any]]:
        return [asdict(r) for r in self.items]


FLAG_KEYS = ("sameAsPermanent", "noWorkExp")

RECORD_KINDS = {
    "education": (Education, 1),
    "referees": (Referee, 2),
    "work": (Work, 0),
}


# ================= the draft =================

class ApplicationDraft:
    STEPS = (1, 2, 3)

    def __init__(self, max_file_bytes: int = MAX_FILE_BYTES):
        self.max_file_bytes = max_file_bytes
        self.reset()

    def reset(self):
        self.current_step = 1
        self.personal = Personal()
        self.permanent = PermanentAddress()
        self.current = CurrentAddress()
        self.same_as_permanent = False
        self.destination = Destination()
        self.english = EnglishAndStay()
        self.declarations = Declarations()
        self.no_work_experience = False
        self.records: Dict[str, RecordList] = {
            kind: RecordList(factory, floor) for kind, (factory, floor) in RECORD_KINDS.items()
        }
        self.slots: Dict[str, FileSlot] = new_slots(self.max_file_bytes)

    # ---- shortcuts ----
    @property
    def educations(self) -> RecordList:
        return self.records["education"]

    @property
    def referees(self) -> RecordList:
        return self.records["referees"]

    @property
    def works(self) -> RecordList:
        return self.records["work"]

    @property
    def sections(self) -> List[Section]:
        return [self.personal, self.permanent, self.current,
                self.destination, self.english, self.declarations]

    # ---- scalar fields ----
    def _section_for(self, key: str) -> Section:
        for s in self.sections:
            if s.owns(key):
                return s
        raise UnknownField(f"Unknown field: {key}", field=key)

    def get(self, key: str) -> Any:
        return self._section_for(key).get(key)

    def set_field(self, key: str, value: Any):
        self.update({key: value})

    def update(self, data: Dict[str, Any]):
        """Keys and values are all checked before the first write."""
        flags: Dict[str, bool] = {}
        planned = []
        for key, value in data.items():
            if key in FLAG_KEYS:
                flags[key] = _as_bool(key, value)
            else:
                section = self._section_for(key)
                planned.append((section, key, section.coerce(key, value)))

        copying = flags.get("sameAsPermanent", self.same_as_permanent)
        for section, key, _ in planned:
            if section is self.current and copying:
                raise PortalError("Current address is copied from the permanent address", field=key)

        if "sameAsPermanent" in flags:
            self.set_same_as_permanent(flags["sameAsPermanent"])
        if "noWorkExp" in flags:
            self.set_no_work_experience(flags["noWorkExp"])
        for section, key, value in planned:
            section.set(key, value)
        if self.same_as_permanent:
            self._copy_permanent()

    def _copy_permanent(self):
        for part in ADDRESS_PARTS:
            setattr(self.current, part, getattr(self.permanent, part))

    def set_same_as_permanent(self, flag: bool):
        was = self.same_as_permanent
        self.same_as_permanent = flag
        if flag:
            self._copy_permanent()
        elif was:
            for part in ADDRESS_PARTS:
                setattr(self.current, part, "")

    def set_no_work_experience(self, flag: bool):
        self.no_work_experience = flag
        if flag:
            self.works.clear()

    # ---- records ----
    def record_list(self, kind: str) -> RecordList:
        try:
            return self.records[kind]
        except KeyError:
            raise UnknownField(f"Unknown record list: {kind}", field=kind)

    # ---- files ----
    def slot(self, name: str) -> FileSlot:
        try:
            return self.slots[name]
        except KeyError:
            raise UnknownSlot(f"Unknown document slot: {name}", slot=name)

    # ---- prefill ----
    def prefill_from(self, profile):
        """Copy contact details from a StudentProfile (or anything shaped like one)."""
        if profile is None:
            return
        self.personal.email = getattr(profile, "email", "") or ""
        full_name = (getattr(profile, "full_name", "") or "").strip()
        if full_name:
            parts = full_name.split(" ")
            self.personal.first_name = parts[0]
            self.personal.family_name = " ".join(parts[1:])
        self.personal.mobile = getattr(profile, "phone", "") or ""

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for s in self.sections:
            data.update(s.to_payload())
        return {
            "current_step": self.current_step,
            "fields": data,
            "sameAsPermanent": self.same_as_permanent,
            "noWorkExp": self.no_work_experience,
            "education": self.educations.to_list(),
            "referees": self.referees.to_list(),
            "work": self.works.to_list(),
            "files": {name: s.to_dict() for name, s in self.slots.items() if len(s)},
        }


class DraftStore:
    """Process-local drafts, one per user."""

    def __init__(self, max_file_bytes: int = MAX_FILE_BYTES):
        self.max_file_bytes = max_file_bytes
        self._drafts: Dict[int, ApplicationDraft] = {}
        self._lock = threading.Lock()

    def get(self, user_id: int, profile_loader: Callable[[int], Any] | None = None) -> ApplicationDraft:
        with self._lock:
            draft = self._drafts.get(user_id)
            if draft is None:
                draft = ApplicationDraft(self.max_file_bytes)
                if profile_loader is not None:
                    draft.prefill_from(profile_loader(user_id))
                self._drafts[user_id] = draft
            return draft

    def discard(self, user_id: int):
        with self._lock:
            self._drafts.pop(user_id, None)
