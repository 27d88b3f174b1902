# services/submission.py
"""
Turn a validated draft into one Application row.

Order of work:
  1) re-check every step (nothing is uploaded or written when one fails)
  2) resolve the university / program the student picked
  3) upload every attached file, one at a time, slot by slot
  4) flatten the draft into one JSON payload
  5) insert the application with status "pending"
  6) reset the draft

Uploads and the insert are not atomic: if the insert fails the uploaded
objects stay where they are and the draft is kept for a retry.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models.application import Application
from models.program import Program
from models.university import University
from services.attachments import SLOT_LIMITS
from services.draft import ApplicationDraft
from services.errors import DraftInvalid, ReferenceInvalid, SubmissionFailed, UnknownField, UploadFailed
from services.session import SessionContext
from services.step_validator import STEP_NAMES, validate_step
from services.storage import object_path

logger = logging.getLogger(__name__)


def resolve_references(university_id, program_id):
    """Both ids are required; the program has to belong to the university."""
    if not university_id or not program_id:
        raise ReferenceInvalid("university_id & program_id required")
    try:
        university_id, program_id = int(university_id), int(program_id)
    except (TypeError, ValueError):
        raise ReferenceInvalid("university_id & program_id must be integers")

    uni = db.session.get(University, university_id)
    if uni is None or not uni.is_active:
        raise ReferenceInvalid("University not found or not accepting applications",
                               university_id=university_id)
    prog = db.session.get(Program, program_id)
    if prog is None or prog.university_id != uni.id:
        raise ReferenceInvalid("Program not found for this university", program_id=program_id)
    return uni, prog


def upload_documents(user_id: int, draft: ApplicationDraft, storage) -> Dict[str, List[str]]:
    """slot -> public URLs. A file that fails to upload is logged and left out."""
    uploaded: Dict[str, List[str]] = {}
    for name, slot in draft.slots.items():
        if not len(slot):
            continue
        urls = []
        for i, f in enumerate(slot.files):
            path = object_path(user_id, name, f.filename, index=i)
            try:
                storage.upload(path, f)
            except (UploadFailed, ValueError) as e:
                logger.warning("upload failed for user %s slot %s file %s: %s", user_id, name, f.filename, e)
                continue
            urls.append(storage.public_url(path))
        uploaded[name] = urls
    return uploaded


def build_payload(draft: ApplicationDraft, uploaded: Dict[str, List[str]]) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    for section in draft.sections:
        payload.update(section.to_payload())
    payload["sameAsPermanent"] = draft.same_as_permanent
    payload["noWorkExp"] = draft.no_work_experience
    for records in draft.records.values():
        payload.update(records.columns())

    for name, urls in uploaded.items():
        if name not in SLOT_LIMITS:
            raise UnknownField(f"Unknown document slot: {name}", field=name)
        if name in payload:
            raise UnknownField(f"Document slot collides with a form field: {name}", field=name)
        payload[name] = list(urls)
    return payload


def submit_draft(session: SessionContext, draft: ApplicationDraft, university_id, program_id,
                 storage) -> Application:
    errors = {}
    for step in STEP_NAMES:
        errors.update(validate_step(draft, step))
    if errors:
        raise DraftInvalid(errors)

    uni, prog = resolve_references(university_id, program_id)

    uploaded = upload_documents(session.user_id, draft, storage)
    payload = build_payload(draft, uploaded)
    all_urls = [u for urls in uploaded.values() for u in urls]

    app_obj = Application(
        user_id=session.user_id,
        university_id=uni.id,
        program_id=prog.id,
        academic_history=f"Full application: {draft.personal.first_name} {draft.personal.family_name}".strip(),
        personal_statement=json.dumps(payload, ensure_ascii=False),
        documents_url=all_urls,
        status="pending",
    )
    try:
        db.session.add(app_obj)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("application insert failed for user %s", session.user_id)
        raise SubmissionFailed(str(e.orig if getattr(e, "orig", None) is not None else e))

    logger.info("application %s submitted by user %s (%s documents)",
                app_obj.id, session.user_id, len(all_urls))
    draft.reset()
    return app_obj


def _rows(payload: Dict[str, Any], field_names: List[str]) -> List[Dict[str, Any]]:
    """Parallel arrays back into records; short columns pad with ""."""
    columns = {f: payload.get(f) or [] for f in field_names}
    count = max((len(c) for c in columns.values()), default=0)
    return [{f: (columns[f][i] if i < len(columns[f]) else "") for f in field_names} for i in range(count)]


def sections_of(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Group a stored payload the way the admin preview shows it."""
    draft = ApplicationDraft()
    names = {
        "personal": draft.personal,
        "permanent_address": draft.permanent,
        "current_address": draft.current,
        "destination": draft.destination,
        "english": draft.english,
        "declarations": draft.declarations,
    }
    out: Dict[str, Any] = {
        name: {k: payload.get(k) for k in section.KEYS.values()}
        for name, section in names.items()
    }
    out["sameAsPermanent"] = bool(payload.get("sameAsPermanent"))
    out["noWorkExp"] = bool(payload.get("noWorkExp"))
    for kind, records in draft.records.items():
        out[kind] = _rows(payload, records.field_names)
    out["documents"] = {
        name: list(payload.get(name) or [])
        for name in SLOT_LIMITS
        if payload.get(name)
    }
    return out
