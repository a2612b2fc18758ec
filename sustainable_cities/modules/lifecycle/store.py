from typing import Any
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from sustainable_cities.modules.lifecycle.engine import Decision


async def write_decision(db: AsyncSession, model: Any, record_id: UUID, decision: Decision) -> bool:
    """
    Apply ``decision`` as one conditional UPDATE.

    The row only changes if it is still in ``decision.from_status`` (and
    still unassigned for a claim). Returns False when another writer got
    there first; nothing is committed here.
    """
    stmt = update(model).where(model.id == record_id, model.status == decision.from_status)
    if decision.require_unassigned:
        stmt = stmt.where(model.assigned_to.is_(None))
    stmt = stmt.values(**decision.changes).execution_options(synchronize_session=False)
    result = await db.execute(stmt)
    return result.rowcount == 1
