# services/step_validator.py
"""
Per-step checks for an application draft.

validate_step(draft, step) -> {field_key: message}; an empty dict means the
step may advance. There is no warning level: a field either passes or
blocks the step.
"""
from __future__ import annotations

import re
from typing import Callable, Dict, List, Tuple

from services.attachments import REQUIRED_SLOTS, SLOT_LIMITS
from services.draft import ApplicationDraft

_email_re = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

PERSONAL, EDUCATION, DOCUMENTS = 1, 2, 3
STEP_NAMES = {PERSONAL: "personal", EDUCATION: "education", DOCUMENTS: "documents"}

STEP1_REQUIRED: List[Tuple[str, str]] = [
    ("firstName", "First name is required"),
    ("familyName", "Family name is required"),
    ("mobile", "Mobile number is required"),
    ("nationality", "Nationality is required"),
    ("countryBirth", "Country of birth is required"),
    ("permCountry", "Permanent country is required"),
    ("permCity", "Permanent city is required"),
    ("permAdd1", "Permanent address is required"),
    ("permPost", "Permanent post code is required"),
    ("permState", "Permanent state is required"),
]
CURRENT_ADDRESS_REQUIRED: List[Tuple[str, str]] = [
    ("currCountry", "Current country is required"),
    ("currCity", "Current city is required"),
    ("currAdd1", "Current address is required"),
    ("currPost", "Current post code is required"),
    ("currState", "Current state is required"),
]

STEP2_REQUIRED: List[Tuple[str, str]] = [
    ("studyLevel", "Level of study is required"),
    ("discipline", "Discipline is required"),
    ("academicStart", "Start date is required"),
    ("academicLocation", "Location is required"),
]
# record attribute -> (error key suffix, message)
EDUCATION_REQUIRED: List[Tuple[str, str, str]] = [
    ("acad_country", "country", "Country is required"),
    ("acad_institution", "institution", "Institution is required"),
    ("acad_course", "course", "Course is required"),
    ("acad_level", "level", "Level is required"),
    ("acad_start", "start", "Start date is required"),
    ("acad_end", "end", "End date is required"),
    ("acad_fulltime", "fulltime", "Study mode is required"),
    ("acad_score", "score", "Score is required"),
]

MIN_REFEREES = 2


def is_valid_email(value: str) -> bool:
    return bool(_email_re.match(value or ""))


def _blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def _require(draft: ApplicationDraft, rules, errors: Dict[str, str]):
    for key, msg in rules:
        if _blank(draft.get(key)):
            errors[key] = msg


def _personal(draft: ApplicationDraft) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    email = draft.get("email")
    if _blank(email):
        errors["email"] = "Email is required"
    elif not is_valid_email(email.strip()):
        errors["email"] = "Invalid email format"
    _require(draft, STEP1_REQUIRED, errors)
    # copied from the permanent address, nothing to check
    if not draft.same_as_permanent:
        _require(draft, CURRENT_ADDRESS_REQUIRED, errors)
    return errors


def _education(draft: ApplicationDraft) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if _blank(draft.get("destCountries")):
        errors["destCountries"] = "Select at least one destination country"
    for i, edu in enumerate(draft.educations):
        for attr, suffix, msg in EDUCATION_REQUIRED:
            if _blank(getattr(edu, attr)):
                errors[f"edu_{i}_{suffix}"] = msg
    _require(draft, STEP2_REQUIRED, errors)
    return errors


def _documents(draft: ApplicationDraft) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if len(draft.referees) < MIN_REFEREES:
        errors["referees"] = f"At least {MIN_REFEREES} referees are required"
    for name in REQUIRED_SLOTS:
        if len(draft.slot(name)) == 0:
            errors[name] = f"{SLOT_LIMITS[name][0]} is required"
    for i, key in enumerate(("dec1", "dec2", "dec3"), start=1):
        if not draft.get(key):
            errors[key] = f"Declaration {i} is required"
    return errors


_VALIDATORS: Dict[int, Callable[[ApplicationDraft], Dict[str, str]]] = {
    PERSONAL: _personal,
    EDUCATION: _education,
    DOCUMENTS: _documents,
}


def validate_step(draft: ApplicationDraft, step: int) -> Dict[str, str]:
    try:
        check = _VALIDATORS[int(step)]
    except (KeyError, TypeError, ValueError):
        raise ValueError(f"unknown step: {step!r}")
    return check(draft)


def advance(draft: ApplicationDraft) -> Dict[str, str]:
    """Validate the current step only; move forward when it passes."""
    errors = validate_step(draft, draft.current_step)
    if not errors:
        draft.current_step = min(draft.current_step + 1, DOCUMENTS)
    return errors


def back(draft: ApplicationDraft) -> int:
    draft.current_step = max(draft.current_step - 1, PERSONAL)
    return draft.current_step
