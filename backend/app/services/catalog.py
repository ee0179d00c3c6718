"""Option catalog lookups.

Every option list the wizard shows is resolved here, keyed by
``(startup_type, field)``.  Rendering code, step validation and the
Scoring Engine all go through the same lookup so they can never
disagree about which ids are valid.
"""

from __future__ import annotations

from typing import Optional

from ..constants import (
    DEFAULT_STARTUP_TYPE,
    SHARED_CATALOGS,
    STARTUP_TYPE_IDS,
    TYPED_CATALOGS,
)
from ..schemas.assessment_schema import CatalogOption

CATALOG_FIELDS: tuple[str, ...] = tuple(SHARED_CATALOGS) + tuple(TYPED_CATALOGS)


def resolve_startup_type(startup_type: Optional[str]) -> str:
    """Map an unset/unknown startup type to the default wording set.

    ``combination`` shares the technology wording.
    """
    if startup_type not in STARTUP_TYPE_IDS or startup_type == "combination":
        return DEFAULT_STARTUP_TYPE
    return startup_type


def catalog_for(startup_type: Optional[str], field: str) -> list[CatalogOption]:
    """Return the options shown for *field* under *startup_type*.

    Raises ``KeyError`` for a field that has no catalog (e.g. ``app_idea``).
    """
    if field in SHARED_CATALOGS:
        raw = SHARED_CATALOGS[field]
    elif field in TYPED_CATALOGS:
        raw = TYPED_CATALOGS[field][resolve_startup_type(startup_type)]
    else:
        raise KeyError(f"No option catalog for field '{field}'")
    return [CatalogOption(**option) for option in raw]


def catalog_ids(startup_type: Optional[str], field: str) -> frozenset[str]:
    return frozenset(option.id for option in catalog_for(startup_type, field))


def is_valid_option(startup_type: Optional[str], field: str, option_id: Optional[str]) -> bool:
    if not option_id:
        return False
    return option_id in catalog_ids(startup_type, field)


def option_label(startup_type: Optional[str], field: str, option_id: Optional[str]) -> Optional[str]:
    """Human label for *option_id*, or None when it is not in the active catalog."""
    for option in catalog_for(startup_type, field):
        if option.id == option_id:
            return option.name
    return None


def all_catalogs(startup_type: Optional[str]) -> dict[str, list[CatalogOption]]:
    """Every catalog for one startup type, keyed by field name."""
    return {field: catalog_for(startup_type, field) for field in CATALOG_FIELDS}
