# routes/meta.py
from flask import Blueprint, jsonify

from models.application import APPLICATION_STATUSES
from models.program import DEGREE_TYPES
from services.attachments import ACCEPTED_EXTENSIONS, MAX_FILE_BYTES, REQUIRED_SLOTS, SLOT_LIMITS

meta_bp = Blueprint("meta", __name__, url_prefix="/api")

COUNTRIES = [
    "Afghanistan", "Albania", "Algeria", "Argentina", "Armenia", "Australia", "Austria",
    "Azerbaijan", "Bahrain", "Bangladesh", "Belarus", "Belgium", "Bhutan", "Bolivia",
    "Bosnia and Herzegovina", "Botswana", "Brazil", "Bulgaria", "Cambodia", "Cameroon",
    "Canada", "Chile", "China", "Colombia", "Costa Rica", "Croatia", "Cyprus",
    "Czech Republic", "Denmark", "Ecuador", "Egypt", "Estonia", "Ethiopia", "Finland",
    "France", "Georgia", "Germany", "Ghana", "Greece", "Hong Kong", "Hungary", "Iceland",
    "India", "Indonesia", "Iran", "Iraq", "Ireland", "Israel", "Italy", "Jamaica", "Japan",
    "Jordan", "Kazakhstan", "Kenya", "Kuwait", "Kyrgyzstan", "Latvia", "Lebanon",
    "Lithuania", "Luxembourg", "Malaysia", "Maldives", "Malta", "Mauritius", "Mexico",
    "Moldova", "Mongolia", "Morocco", "Myanmar", "Nepal", "Netherlands", "New Zealand",
    "Nigeria", "Norway", "Oman", "Pakistan", "Palestine", "Peru", "Philippines", "Poland",
    "Portugal", "Qatar", "Romania", "Russia", "Rwanda", "Saudi Arabia", "Senegal",
    "Serbia", "Singapore", "Slovakia", "Slovenia", "South Africa", "South Korea", "Spain",
    "Sri Lanka", "Sudan", "Sweden", "Switzerland", "Taiwan", "Tanzania", "Thailand",
    "Tunisia", "Turkey", "Uganda", "Ukraine", "United Arab Emirates", "United Kingdom",
    "United States", "Uruguay", "Uzbekistan", "Venezuela", "Vietnam", "Zambia", "Zimbabwe",
]

# single source of truth for the form's select inputs
OPTIONS = {
    "countries": COUNTRIES,
    "destination_countries": [
        "United Kingdom", "United States", "Canada", "Australia", "Ireland",
        "Germany", "France", "Netherlands", "New Zealand", "Malaysia", "Dubai",
    ],
    "study_levels": [
        {"value": "foundation", "label": "Foundation"},
        {"value": "undergraduate", "label": "Undergraduate"},
        {"value": "postgraduate", "label": "Postgraduate"},
        {"value": "phd", "label": "PhD / Doctorate"},
        {"value": "diploma", "label": "Diploma"},
        {"value": "pre_masters", "label": "Pre-Masters"},
    ],
    "gender_options": [
        {"value": "male", "label": "Male"},
        {"value": "female", "label": "Female"},
        {"value": "other", "label": "Other"},
        {"value": "prefer_not_to_say", "label": "Prefer not to say"},
    ],
    "study_modes": [
        {"value": "Full Time", "label": "Full Time"},
        {"value": "Part Time", "label": "Part Time"},
    ],
    "yes_no": [
        {"value": "Yes", "label": "Yes"},
        {"value": "No", "label": "No"},
    ],
    "degree_types": list(DEGREE_TYPES),
    "application_statuses": list(APPLICATION_STATUSES),
    "document_slots": [
        {"name": name, "label": label, "max_files": limit, "required": name in REQUIRED_SLOTS}
        for name, (label, limit) in SLOT_LIMITS.items()
    ],
    "upload": {
        "max_file_bytes": MAX_FILE_BYTES,
        "accepted_extensions": list(ACCEPTED_EXTENSIONS),
    },
}


@meta_bp.get("/meta/options")
def meta_options():
    """Reference lists for every select input of the application form."""
    return jsonify(OPTIONS)
