"""A draft that passes every step, and helpers to build one."""

from __future__ import annotations

from services.attachments import Attachment, REQUIRED_SLOTS
from services.draft import ApplicationDraft

STEP1_FIELDS = {
    "firstName": "Amina",
    "familyName": "Rahman",
    "email": "amina@example.com",
    "mobile": "+8801711000000",
    "nationality": "Bangladesh",
    "countryBirth": "Bangladesh",
    "permCountry": "Bangladesh",
    "permCity": "Dhaka",
    "permAdd1": "12 Lake Road",
    "permAdd2": "Flat 3B",
    "permPost": "1205",
    "permState": "Dhaka",
    "currCountry": "United Kingdom",
    "currCity": "London",
    "currAdd1": "4 High Street",
    "currPost": "E1 6AN",
    "currState": "London",
}

STEP2_FIELDS = {
    "destCountries": ["United Kingdom"],
    "studyLevel": "postgraduate",
    "discipline": "Computer Science",
    "academicStart": "2026-09",
    "academicLocation": "Leeds",
}

EDUCATION = {
    "acad_country": "Bangladesh",
    "acad_institution": "University of Dhaka",
    "acad_course": "BSc Computer Science",
    "acad_level": "Undergraduate",
    "acad_start": "2019-01",
    "acad_end": "2023-01",
    "acad_fulltime": "Full Time",
    "acad_score": "3.6/4.0",
}

DECLARATIONS = {"dec1": True, "dec2": True, "dec3": True}


def pdf(name: str, size: int | None = None) -> Attachment:
    return Attachment(filename=name, content=b"%PDF-1.4 " + name.encode(), size=size)


def documents_only(draft: ApplicationDraft | None = None) -> ApplicationDraft:
    """Only what step 3 asks for: referees, required slots, declarations."""
    draft = draft or ApplicationDraft()
    for i, name in enumerate(("Dr. Karim", "Prof. Lee")):
        draft.referees.update(i, "ref_name", name)
    for slot in REQUIRED_SLOTS:
        draft.slot(slot).add([pdf(f"{slot}.pdf")])
    draft.update(DECLARATIONS)
    return draft


def complete_draft(draft: ApplicationDraft | None = None) -> ApplicationDraft:
    draft = draft or ApplicationDraft()
    draft.update(STEP1_FIELDS)
    draft.update(STEP2_FIELDS)
    for field, value in EDUCATION.items():
        draft.educations.update(0, field, value)
    for i, name in enumerate(("Dr. Karim", "Prof. Lee")):
        draft.referees.update(i, "ref_name", name)
        draft.referees.update(i, "ref_email", f"referee{i}@example.com")
    for slot in REQUIRED_SLOTS:
        draft.slot(slot).add([pdf(f"{slot}.pdf")])
    draft.update(DECLARATIONS)
    return draft
