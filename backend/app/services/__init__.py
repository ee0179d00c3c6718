from .catalog import catalog_for, is_valid_option, option_label
from .form_validation import format_phone_number, normalize_phone_number, validate_email, validate_phone_number
from .race import RaceResult, race
from .scoring_engine import compute_score, score_breakdown, segment_for

__all__ = [
    "catalog_for",
    "is_valid_option",
    "option_label",
    "format_phone_number",
    "normalize_phone_number",
    "validate_email",
    "validate_phone_number",
    "RaceResult",
    "race",
    "compute_score",
    "score_breakdown",
    "segment_for",
]
