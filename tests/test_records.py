"""Repeatable education / referee / work records."""

from __future__ import annotations

import pytest

from services.draft import ApplicationDraft, RecordList, Work
from services.errors import FloorReached, UnknownField


def test_initial_counts():
    draft = ApplicationDraft()
    assert len(draft.educations) == 1
    assert len(draft.referees) == 2
    assert len(draft.works) == 0


def test_remove_keeps_order_of_the_rest():
    draft = ApplicationDraft()
    edu = draft.educations
    edu.append()
    edu.append()
    for i, name in enumerate(("Dhaka", "BUET", "NSU")):
        edu.update(i, "acad_institution", name)

    removed = edu.remove(1)
    assert removed.acad_institution == "BUET"
    assert [e.acad_institution for e in edu] == ["Dhaka", "NSU"]


@pytest.mark.parametrize("kind,floor", [("education", 1), ("referees", 2)])
def test_floor_blocks_removal(kind, floor):
    records = ApplicationDraft().record_list(kind)
    assert len(records) == floor
    with pytest.raises(FloorReached):
        records.remove(0)
    assert len(records) == floor


def test_work_can_be_emptied():
    works = RecordList(Work, 0)
    works.append()
    works.remove(0)
    assert len(works) == 0


def test_unknown_field_and_bad_index():
    referees = ApplicationDraft().referees
    with pytest.raises(UnknownField):
        referees.update(0, "ref_shoe_size", "42")
    with pytest.raises(IndexError):
        referees.update(5, "ref_name", "Nobody")
    with pytest.raises(IndexError):
        referees.remove(-1)


def test_unknown_record_kind():
    with pytest.raises(UnknownField):
        ApplicationDraft().record_list("hobbies")


def test_no_work_experience_clears_work():
    draft = ApplicationDraft()
    draft.works.append()
    draft.works.update(0, "work_title", "Intern")
    draft.update({"noWorkExp": True})
    assert draft.no_work_experience is True
    assert len(draft.works) == 0


def test_columns_are_parallel_arrays():
    draft = ApplicationDraft()
    draft.referees.update(0, "ref_name", "Dr. Karim")
    draft.referees.update(1, "ref_email", "lee@example.com")
    cols = draft.referees.columns()
    assert cols["ref_name"] == ["Dr. Karim", ""]
    assert cols["ref_email"] == ["", "lee@example.com"]
    assert all(len(v) == 2 for v in cols.values())


def test_append_uses_record_defaults():
    draft = ApplicationDraft()
    rec = draft.works.append()
    assert len(draft.works) == 1
    assert rec == Work()
    assert rec.work_current == "No"
    assert draft.educations.append().acad_current == "No"
