# services/ai_consultation.py
"""
AI consultation: suggest universities, programs and careers from a
student profile.

The gateway speaks the OpenAI chat-completions dialect. Whatever the
model answers, the caller always gets the recommendation structure back:
content that is not JSON (even after stripping a ``` fence) is replaced
by DEFAULT_RECOMMENDATIONS.
"""
from __future__ import annotations

import copy
import json
import logging
import re
from typing import Any, Dict, List

import requests
from flask import current_app

from extensions import db
from models.ai_consultation import AIConsultation
from models.student_profile import LIST_FIELDS, StudentProfile
from models.university import University
from services.errors import AIGatewayError, NotFound, QuotaExhausted, RateLimited
from services.session import SessionContext

logger = logging.getLogger(__name__)

DEFAULT_RECOMMENDATIONS: Dict[str, Any] = {
    "recommended_programs": [],
    "career_suggestions": [],
    "recommended_universities": [],
    "next_steps": ["Complete your profile for better recommendations"],
    "summary": "We couldn't generate personalized recommendations. Please try again.",
}
RESULT_KEYS = ("recommended_programs", "career_suggestions", "recommended_universities", "next_steps")

CONSULTATION_FIELDS = ("education_level", "gpa", "interests", "skills", "preferred_countries", "budget_range")

_fence_json_re = re.compile(r"```json\n?([\s\S]*?)\n?```")
_fence_re = re.compile(r"```\n?([\s\S]*?)\n?```")

SYSTEM_PROMPT = """You are an expert academic career counselor with deep knowledge of international universities and career paths. Analyze the student's profile and provide personalized recommendations.

Your response MUST be valid JSON with this exact structure:
{{
  "recommended_programs": [
    {{ "name": "Program Name", "reason": "Brief reason why this program suits the student" }}
  ],
  "career_suggestions": [
    {{ "title": "Career Title", "description": "Brief description of the career path" }}
  ],
  "recommended_universities": [
    {{ "id": "university_id", "name": "University Name", "reason": "Why this university is a good fit" }}
  ],
  "next_steps": [
    "Step 1 description",
    "Step 2 description"
  ],
  "summary": "A brief 2-3 sentence summary of your recommendations"
}}

Available universities for recommendation (use these IDs and names):
{universities}

Only recommend universities from the provided list. Match recommendations to the student's interests, preferred countries, and budget."""


def _joined(values, default: str) -> str:
    values = [str(v) for v in (values or []) if str(v).strip()]
    return ", ".join(values) if values else default


def build_messages(profile: Dict[str, Any], universities: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    user_prompt = (
        "Student Profile:\n"
        f"- Education Level: {profile.get('education_level') or 'Not specified'}\n"
        f"- GPA/Grades: {profile.get('gpa') or 'Not specified'}\n"
        f"- Interests: {_joined(profile.get('interests'), 'Not specified')}\n"
        f"- Skills: {_joined(profile.get('skills'), 'Not specified')}\n"
        f"- Preferred Countries: {_joined(profile.get('preferred_countries'), 'Any')}\n"
        f"- Budget Range: {profile.get('budget_range') or 'Not specified'}\n\n"
        "Please analyze this profile and provide personalized recommendations."
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT.format(universities=json.dumps(universities, indent=2))},
        {"role": "user", "content": user_prompt},
    ]


def parse_recommendations(content: str | None) -> Dict[str, Any]:
    """Model text -> recommendation dict, never raises."""
    if not content:
        return copy.deepcopy(DEFAULT_RECOMMENDATIONS)
    m = _fence_json_re.search(content) or _fence_re.search(content)
    raw = m.group(1) if m else content
    try:
        data = json.loads(raw.strip())
    except ValueError:
        logger.error("failed to parse AI response: %s", content[:500])
        return copy.deepcopy(DEFAULT_RECOMMENDATIONS)
    if not isinstance(data, dict):
        logger.error("AI response is not an object: %s", content[:500])
        return copy.deepcopy(DEFAULT_RECOMMENDATIONS)

    for key in RESULT_KEYS:
        if not isinstance(data.get(key), list):
            data[key] = []
    if not isinstance(data.get("summary"), str):
        data["summary"] = ""
    return data


def request_recommendations(profile: Dict[str, Any], universities: List[Dict[str, Any]]) -> Dict[str, Any]:
    cfg = current_app.config
    api_key = cfg.get("AI_API_KEY")
    if not api_key:
        raise AIGatewayError("AI_API_KEY is not configured")

    try:
        resp = requests.post(
            cfg["AI_GATEWAY_URL"],
            headers={"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"},
            json={"model": cfg["AI_MODEL"], "messages": build_messages(profile, universities)},
            timeout=(cfg.get("AI_CONNECT_TIMEOUT", 8), cfg.get("AI_TIMEOUT", 60)),
        )
    except requests.RequestException as e:
        logger.error("AI gateway request error: %s", e)
        raise AIGatewayError("AI gateway error")

    if resp.status_code == 429:
        raise RateLimited()
    if resp.status_code == 402:
        raise QuotaExhausted()
    if resp.status_code != 200:
        logger.error("AI gateway error: %s %s", resp.status_code, resp.text[:300])
        raise AIGatewayError("AI gateway error")

    try:
        data = resp.json()
    except ValueError:
        logger.error("AI gateway returned a non-JSON envelope: %s", resp.text[:300])
        return copy.deepcopy(DEFAULT_RECOMMENDATIONS)
    choices = (data.get("choices") or []) if isinstance(data, dict) else []
    content = ((choices[0] or {}).get("message") or {}).get("content") if choices else None
    return parse_recommendations(content)


# ---------- profile + persistence ----------

def _profile_updates(data: Dict[str, Any]) -> Dict[str, Any]:
    out = {}
    for k in CONSULTATION_FIELDS:
        if k not in data:
            continue
        v = data[k]
        if k in LIST_FIELDS:
            if isinstance(v, str):
                v = [x.strip() for x in v.split(",") if x.strip()]
            else:
                v = [str(x).strip() for x in (v or []) if str(x).strip()]
        out[k] = v
    return out


def _titles(items, key: str) -> List[str]:
    titles = []
    for x in items or []:
        if isinstance(x, dict):
            if x.get(key):
                titles.append(str(x[key]))
        elif x:
            titles.append(str(x))
    return titles


def run_consultation(session: SessionContext, data: Dict[str, Any]) -> AIConsultation:
    """Save the profile, ask the gateway, store the answer."""
    prof = db.session.get(StudentProfile, session.user_id)
    if prof is None:
        raise NotFound("Profile not found")
    for k, v in _profile_updates(data).items():
        setattr(prof, k, v)
    db.session.commit()

    unis = (
        University.query.filter_by(status="active")
        .order_by(University.name.asc())
        .all()
    )
    universities = [{"id": u.id, "name": u.name, "country": u.country, "city": u.city} for u in unis]
    profile = {k: getattr(prof, k) for k in CONSULTATION_FIELDS}

    recs = request_recommendations(profile, universities)

    row = AIConsultation(
        user_id=session.user_id,
        recommendations=recs,
        career_suggestions=_titles(recs.get("career_suggestions"), "title"),
        recommended_universities=_titles(recs.get("recommended_universities"), "name"),
        next_steps=[str(s) for s in recs.get("next_steps") or []],
    )
    db.session.add(row)
    db.session.commit()
    return row
