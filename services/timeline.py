# services/timeline.py
"""
Four-step progress view derived from Application.status.
Nothing is stored; the steps are recomputed on every read.
"""
from __future__ import annotations

from typing import Any, Dict, List

from models.application import DECIDED

# step -> statuses under which the step counts as done
STEP_DONE_WHEN = [
    ("submitted", "Submitted", None),  # always done
    ("under_review", "Under Review", {"under_review", "interview_scheduled", "accepted", "rejected"}),
    ("interview", "Interview", {"interview_scheduled", "accepted", "rejected"}),
    ("decision", "Decision", set(DECIDED)),
]


def _iso(dt):
    return dt.isoformat() if dt else None


def timeline_steps(app_obj) -> List[Dict[str, Any]]:
    status = app_obj.status
    dates = {
        "submitted": _iso(app_obj.created_at),
        "under_review": _iso(app_obj.updated_at) if status != "pending" else None,
        "interview": _iso(app_obj.interview_date),
        "decision": _iso(app_obj.updated_at) if status in DECIDED else None,
    }
    steps = []
    for key, label, done_when in STEP_DONE_WHEN:
        steps.append({
            "key": key,
            "label": label,
            "completed": True if done_when is None else status in done_when,
            "date": dates[key],
        })
    return steps
