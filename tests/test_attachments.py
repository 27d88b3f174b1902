"""Attachment slots: count limit, size ceiling and accepted types."""

from __future__ import annotations

import pytest

from sample_data import pdf
from services.attachments import (
    BAD_TYPE,
    MAX_FILE_BYTES,
    SLOT_FULL,
    SLOT_LIMITS,
    TOO_LARGE,
    Attachment,
    FileSlot,
    new_slots,
)
from services.draft import ApplicationDraft
from services.errors import UnknownSlot

MB = 1024 * 1024


def test_oversized_file_is_reported_and_the_rest_fill_the_slot():
    slot = FileSlot("cv", max_files=2, max_bytes=5 * MB)
    result = slot.add([pdf("a.pdf", 1 * MB), pdf("b.pdf", 6 * MB), pdf("c.pdf", 2 * MB)])

    assert [f.filename for f in slot.files] == ["a.pdf", "c.pdf"]
    assert result.rejected == [("b.pdf", TOO_LARGE)]


def test_full_slot_rejects_in_offered_order():
    slot = FileSlot("cv", max_files=2)
    result = slot.add([pdf("a.pdf"), pdf("b.pdf"), pdf("c.pdf")])
    assert [a.filename for a in result.accepted] == ["a.pdf", "b.pdf"]
    assert result.rejected == [("c.pdf", SLOT_FULL)]
    assert slot.remaining == 0


def test_bad_type():
    slot = FileSlot("others", max_files=5)
    result = slot.add([Attachment("notes.txt", b"hello"), pdf("ok.PDF")])
    assert result.to_dict() == {
        "accepted": ["ok.PDF"],
        "rejected": [{"filename": "notes.txt", "reason": BAD_TYPE}],
    }


def test_remove_shifts_later_files_down():
    slot = FileSlot("transcript", max_files=10)
    slot.add([pdf("y1.pdf"), pdf("y2.pdf"), pdf("y3.pdf")])
    slot.remove(0)
    assert [f.filename for f in slot.files] == ["y2.pdf", "y3.pdf"]
    with pytest.raises(IndexError):
        slot.remove(2)


def test_every_slot_is_created_with_its_limit():
    slots = new_slots()
    assert set(slots) == set(SLOT_LIMITS)
    assert slots["appScreenshots"].max_files == 50
    assert slots["cv"].max_bytes == MAX_FILE_BYTES


def test_unknown_slot():
    with pytest.raises(UnknownSlot):
        ApplicationDraft().slot("selfie")
