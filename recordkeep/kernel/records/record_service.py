"""
Record service - owner-scoped CRUD over records.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from recordkeep.kernel.models.record import Record
from recordkeep.logging_config import get_logger

logger = get_logger(__name__)


class RecordService:
    """
    Service for record operations.

    Every lookup is filtered by owner, so a record belonging to someone else
    behaves exactly like a missing one.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, owner_id: uuid.UUID, text: str) -> Record:
        record = Record(owner_id=owner_id, text=text, completed=False)
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)

        logger.info("Record created", extra={"record_id": str(record.id), "user_id": str(owner_id)})
        return record

    async def list_for_owner(self, owner_id: uuid.UUID) -> List[Record]:
        query = (
            select(Record)
            .where(Record.owner_id == owner_id)
            .order_by(Record.created_at, Record.id)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get(self, owner_id: uuid.UUID, record_id: uuid.UUID) -> Optional[Record]:
        query = select(Record).where(
            Record.id == record_id,
            Record.owner_id == owner_id,
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def update(
        self,
        owner_id: uuid.UUID,
        record_id: uuid.UUID,
        text: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Optional[Record]:
        """
        Update a record's text and/or completion state.

        Completing a record stamps completed_at; reopening clears it.

        Returns:
            Updated record or None if not found
        """
        record = await self.get(owner_id, record_id)
        if record is None:
            return None

        if text is not None:
            record.text = text

        if completed is not None:
            record.completed = completed
            record.completed_at = datetime.now(timezone.utc) if completed else None

        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def delete(self, owner_id: uuid.UUID, record_id: uuid.UUID) -> Optional[Record]:
        record = await self.get(owner_id, record_id)
        if record is None:
            return None

        await self.session.delete(record)
        await self.session.flush()

        logger.info("Record deleted", extra={"record_id": str(record_id), "user_id": str(owner_id)})
        return record
