# services/attachments.py
"""
Per-slot file collection for an application draft.

Each slot ("cv", "passportCopy", ...) keeps an ordered list of files that
are held in memory until the draft is submitted. A slot has its own
maximum count; every file must also stay under a per-file size ceiling.
Files that cannot be taken are reported back with a reason instead of
vanishing from the list.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

MAX_FILE_BYTES = 5 * 1024 * 1024
ACCEPTED_EXTENSIONS = (".pdf", ".doc", ".docx", ".png", ".jpg", ".jpeg")

# slot name -> (label, max files)
SLOT_LIMITS: Dict[str, Tuple[str, int]] = {
    "cv": ("CV / Resume", 2),
    "passportCopy": ("Passport Copy", 2),
    "transcript": ("Transcript", 10),
    "aLevel": ("A Level / Higher Secondary / 12th Grade", 2),
    "appScreenshots": ("Application Screenshots", 50),
    "casCopy": ("CAS Copy", 2),
    "chatUpload": ("Chat Upload", 10),
    "disability": ("Disability Documents", 2),
    "englishTest": ("English Test Files", 5),
    "euSettle": ("EU Settle / Pre Settled Documents", 3),
    "oLevel": ("O Level / Senior Secondary / 10th Grade", 2),
    "otherCerts": ("Other Certificates or Diplomas", 10),
    "others": ("Others", 5),
    "pgDegree": ("PG Provisional / Degree", 2),
    "portfolio": ("Portfolio", 10),
    "postBrp": ("Post Admission - BRP", 2),
    "postDeposit": ("Post Admission - TT/Deposit Receipt", 2),
    "postVisa": ("Post Admission - Visa", 2),
    "refLetter": ("Reference Letter", 3),
    "sop": ("Statement of Purpose", 8),
    "ugDegree": ("UG Provisional / Degree", 2),
    "uniApp": ("University Application Documents", 10),
    "visaRefusal": ("Visa Refusal", 3),
    "workCert": ("Work Experience Certificate", 3),
}

REQUIRED_SLOTS = ("cv", "passportCopy", "transcript")

# rejection reasons
TOO_LARGE = "too_large"
SLOT_FULL = "slot_full"
BAD_TYPE = "bad_type"


@dataclass
class Attachment:
    filename: str
    content: bytes = b""
    content_type: str | None = None
    size: int | None = None

    def __post_init__(self):
        if self.size is None:
            self.size = len(self.content)

    def to_dict(self):
        return {"filename": self.filename, "size": self.size, "content_type": self.content_type}


@dataclass
class AddResult:
    accepted: List[Attachment] = field(default_factory=list)
    rejected: List[Tuple[str, str]] = field(default_factory=list)  # (filename, reason)

    def to_dict(self):
        return {
            "accepted": [a.filename for a in self.accepted],
            "rejected": [{"filename": n, "reason": r} for n, r in self.rejected],
        }


def _has_accepted_extension(filename: str) -> bool:
    return os.path.splitext(filename or "")[1].lower() in ACCEPTED_EXTENSIONS


class FileSlot:
    def __init__(self, name: str, max_files: int, max_bytes: int = MAX_FILE_BYTES):
        self.name = name
        self.max_files = max_files
        self.max_bytes = max_bytes
        self.files: List[Attachment] = []

    def __len__(self):
        return len(self.files)

    @property
    def remaining(self) -> int:
        return max(0, self.max_files - len(self.files))

    def add(self, candidates: Iterable[Attachment]) -> AddResult:
        """
        Take candidates in the order offered while the slot has room.
        Drag-and-drop and the file picker both end up here.
        """
        result = AddResult()
        for f in candidates:
            if len(self.files) >= self.max_files:
                result.rejected.append((f.filename, SLOT_FULL))
                continue
            if f.size > self.max_bytes:
                result.rejected.append((f.filename, TOO_LARGE))
                continue
            if not _has_accepted_extension(f.filename):
                result.rejected.append((f.filename, BAD_TYPE))
                continue
            self.files.append(f)
            result.accepted.append(f)
        return result

    def remove(self, index: int) -> Attachment:
        if index < 0 or index >= len(self.files):
            raise IndexError(f"{self.name}: no file at index {index}")
        return self.files.pop(index)

    def clear(self):
        self.files = []

    def to_dict(self):
        return {
            "name": self.name,
            "max_files": self.max_files,
            "files": [f.to_dict() for f in self.files],
        }


def new_slots(max_bytes: int = MAX_FILE_BYTES) -> Dict[str, FileSlot]:
    return {name: FileSlot(name, limit, max_bytes) for name, (_, limit) in SLOT_LIMITS.items()}
