"""IRI helpers: related resources travel as "/api/{route}/{id}" or as a bare id"""

import re
from typing import Optional, Union

from fastapi import HTTPException
from sqlalchemy.orm import Session

# Largest value a BIGINT primary key can hold
MAX_ID = 2**63 - 1


def iri(route: str, entity_id: Optional[int]) -> Optional[str]:
    if entity_id is None:
        return None
    return f"/api/{route}/{entity_id}"


def extract_id(value: Union[str, int, None], route: str) -> Optional[int]:
    """Return the numeric id of an IRI or bare id, None when it has none"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        entity_id = value
    else:
        match = re.search(rf"/api/{re.escape(route)}/(\d+)", value)
        raw = match.group(1) if match else value.strip()
        if not raw.isdigit():
            return None
        entity_id = int(raw)

    return entity_id if 0 < entity_id <= MAX_ID else None


def extract_entity(db: Session, value: Union[str, int, None], model, route: str):
    """
    Load the entity referenced by an IRI or bare id.

    Raises:
        HTTPException 404 when the id is malformed or the row does not exist
    """
    entity_id = extract_id(value, route)
    entity = db.get(model, entity_id) if entity_id is not None else None
    if entity is None:
        shown = entity_id if entity_id is not None else value
        raise HTTPException(status_code=404, detail=f"{model.__name__} #{shown} not found")
    return entity
