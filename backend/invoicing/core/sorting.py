"""Ordering for list queries, driven by ``?order_by=field:direction``."""

from __future__ import annotations

from sqlalchemy import asc, desc
from sqlalchemy.orm import Query

from invoicing.core.database import Base

DIRECTIONS = {"asc": asc, "desc": desc}


def parse_order_by(
    order_by: str | None,
    model: type[Base],
    default_field: str,
    default_direction: str,
) -> tuple[str, str]:
    """Split ``"total_amount:desc"`` into a column name and a direction.

    Names that are not table columns fall back to the defaults; an unknown
    direction falls back to ``default_direction``.
    """
    if not order_by:
        return default_field, default_direction

    name, _, direction = order_by.partition(":")
    name = name.strip()
    if name not in model.__table__.columns:
        return default_field, default_direction

    direction = direction.strip().lower() or "asc"
    if direction not in DIRECTIONS:
        direction = default_direction
    return name, direction


def apply_order_by(
    query: Query,  # type: ignore[type-arg]
    model: type[Base],
    order_by: str | None,
    default_field: str = "id",
    default_direction: str = "asc",
) -> Query:  # type: ignore[type-arg]
    """Order ``query`` by the requested column, then by primary key.

    The trailing ``id`` sort keeps offset pages stable when the requested
    column has duplicate values.
    """
    field, direction = parse_order_by(order_by, model, default_field, default_direction)
    query = query.order_by(DIRECTIONS[direction](getattr(model, field)))
    if field != "id":
        query = query.order_by(asc(model.id))
    return query
