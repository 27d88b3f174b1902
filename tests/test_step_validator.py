"""Per-step validation of the application draft."""

from __future__ import annotations

import pytest

from sample_data import complete_draft
from services.draft import ADDRESS_PARTS, ApplicationDraft
from services.errors import PortalError
from services.step_validator import (
    CURRENT_ADDRESS_REQUIRED,
    DOCUMENTS,
    EDUCATION,
    PERSONAL,
    STEP1_REQUIRED,
    STEP2_REQUIRED,
    advance,
    back,
    is_valid_email,
    validate_step,
)


@pytest.fixture(name="draft")
def draft_fixture() -> ApplicationDraft:
    return complete_draft()


def test_complete_draft_passes_every_step(draft):
    for step in (PERSONAL, EDUCATION, DOCUMENTS):
        assert validate_step(draft, step) == {}


@pytest.mark.parametrize("key,message", STEP1_REQUIRED + CURRENT_ADDRESS_REQUIRED)
def test_each_personal_field_blocks_alone(draft, key, message):
    draft.set_field(key, "   ")
    assert validate_step(draft, PERSONAL) == {key: message}


@pytest.mark.parametrize("key,message", STEP2_REQUIRED)
def test_each_destination_field_blocks_alone(draft, key, message):
    draft.set_field(key, "")
    assert validate_step(draft, EDUCATION) == {key: message}


@pytest.mark.parametrize("value,message", [
    ("", "Email is required"),
    ("amina.example.com", "Invalid email format"),
    ("amina@example", "Invalid email format"),
    ("am ina@example.com", "Invalid email format"),
])
def test_email_messages(draft, value, message):
    draft.set_field("email", value)
    assert validate_step(draft, PERSONAL) == {"email": message}


def test_email_pattern():
    assert is_valid_email("a@b.co")
    assert not is_valid_email("a@b")
    assert not is_valid_email(None)


def test_same_as_permanent_copies_and_skips_current_checks():
    draft = ApplicationDraft()
    draft.update({k: v for k, v in complete_draft().to_dict()["fields"].items()
                  if not k.startswith("curr")})
    assert "currCity" in validate_step(draft, PERSONAL)

    draft.update({"sameAsPermanent": True})
    for part in ADDRESS_PARTS:
        assert getattr(draft.current, part) == getattr(draft.permanent, part)
    assert draft.current.add2 == "Flat 3B"
    assert validate_step(draft, PERSONAL) == {}

    draft.set_field("permCity", "Chattogram")
    assert draft.current.city == "Chattogram"


def test_current_address_locked_while_copied(draft):
    draft.update({"sameAsPermanent": True})
    with pytest.raises(PortalError):
        draft.set_field("currCity", "Paris")


def test_unsetting_same_as_permanent_clears_current(draft):
    draft.update({"sameAsPermanent": True})
    draft.update({"sameAsPermanent": False})
    assert all(getattr(draft.current, part) == "" for part in ADDRESS_PARTS)
    errors = validate_step(draft, PERSONAL)
    assert set(errors) == {k for k, _ in CURRENT_ADDRESS_REQUIRED}


def test_destination_countries_required(draft):
    draft.set_field("destCountries", [])
    assert validate_step(draft, EDUCATION) == {
        "destCountries": "Select at least one destination country"
    }


def test_education_errors_are_indexed(draft):
    draft.educations.append()
    draft.educations.update(1, "acad_country", "India")
    errors = validate_step(draft, EDUCATION)
    assert "edu_1_country" not in errors
    assert errors["edu_1_institution"] == "Institution is required"
    assert errors["edu_1_score"] == "Score is required"
    assert not any(k.startswith("edu_0_") for k in errors)


def test_documents_step_requires_referees_slots_and_declarations():
    draft = ApplicationDraft()
    draft.referees.items = draft.referees.items[:1]
    errors = validate_step(draft, DOCUMENTS)
    assert errors["referees"] == "At least 2 referees are required"
    assert errors["cv"] == "CV / Resume is required"
    assert errors["passportCopy"] == "Passport Copy is required"
    assert errors["transcript"] == "Transcript is required"
    assert errors["dec2"] == "Declaration 2 is required"


def test_unknown_step():
    with pytest.raises(ValueError):
        validate_step(ApplicationDraft(), 4)


def test_advance_only_when_current_step_valid():
    draft = ApplicationDraft()
    errors = advance(draft)
    assert errors
    assert draft.current_step == PERSONAL

    complete_draft(draft)
    assert advance(draft) == {}
    assert advance(draft) == {}
    assert draft.current_step == DOCUMENTS
    assert advance(draft) == {}
    assert draft.current_step == DOCUMENTS


def test_back_stops_at_first_step(draft):
    draft.current_step = DOCUMENTS
    assert back(draft) == EDUCATION
    assert back(draft) == PERSONAL
    assert back(draft) == PERSONAL


def test_clearing_an_unset_flag_keeps_current_address(draft):
    draft.update({"sameAsPermanent": False})
    assert draft.current.city == "London"
    assert draft.current.add1 == "4 High Street"


@pytest.mark.parametrize("value,expected", [(True, True), ("true", True), ("False", False), (False, False)])
def test_boolean_fields_parse_strictly(value, expected):
    draft = ApplicationDraft()
    draft.update({"dec1": value, "noWorkExp": value})
    assert draft.declarations.dec1 is expected
    assert draft.no_work_experience is expected


@pytest.mark.parametrize("value", ["no", "0", "yes", 1, None, ""])
def test_boolean_fields_refuse_other_values(value):
    draft = ApplicationDraft()
    with pytest.raises(PortalError):
        draft.update({"dec1": value})
    with pytest.raises(PortalError):
        draft.update({"sameAsPermanent": value})
    assert draft.declarations.dec1 is False
    assert draft.same_as_permanent is False


def test_bad_value_changes_nothing():
    draft = ApplicationDraft()
    with pytest.raises(PortalError):
        draft.update({"firstName": "Amina", "permCity": "Dhaka", "dec2": "false", "destCountries": {"x": 1}})
    assert draft.personal.first_name == ""
    assert draft.permanent.city == ""
    assert draft.declarations.dec2 is False


def test_current_address_in_same_request_as_flag_is_refused(draft):
    with pytest.raises(PortalError):
        draft.update({"sameAsPermanent": True, "currCity": "Paris"})
    assert draft.same_as_permanent is False
    assert draft.current.city == "London"
