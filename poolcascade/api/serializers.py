"""ORM row -> JSON-ready dict conversion for the routers."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from poolcascade.core.projects import ProjectView


def model_to_dict(obj: Any) -> dict[str, Any] | None:
    if obj is None:
        return None
    d: dict[str, Any] = {}
    for c in obj.__table__.columns:
        val = getattr(obj, c.name)
        if hasattr(val, "isoformat"):
            val = val.isoformat()
        elif isinstance(val, Decimal):
            val = float(val)
        d[c.name] = val
    return d


def relation_to_dict(relation: dict[str, Any]) -> dict[str, Any]:
    return {key: model_to_dict(value) for key, value in relation.items()}


def view_to_dict(view: ProjectView) -> dict[str, Any]:
    d = model_to_dict(view.project)
    # Effective pool, not the stored one, once a migration was followed.
    d["pool_platform"] = view.pool_platform
    d["pool_id"] = view.pool_id
    d["project_profit"] = view.project_profit
    d["pool"] = model_to_dict(view.pool)
    d["token"] = model_to_dict(view.token)
    d["pool_relation"] = relation_to_dict(view.pool_relation)
    d["resolution"] = view.resolution.as_dict() if view.resolution else None
    return d


def created_to_dict(created: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in created.items():
        if isinstance(value, list):
            out[key] = [model_to_dict(v) for v in value]
        else:
            out[key] = model_to_dict(value)
    return out
