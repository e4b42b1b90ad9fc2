"""
Record endpoints. Every route is scoped to the authenticated owner.
"""

import uuid

from fastapi import APIRouter, HTTPException, status

from recordkeep.api.deps import CurrentUser, DbSession
from recordkeep.kernel.records.record_service import RecordService
from recordkeep.schemas.record import (
    RecordCreate,
    RecordListResponse,
    RecordResponse,
    RecordUpdate,
)

router = APIRouter()


def _record_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Record not found")


def _parse_record_id(record_id: str) -> uuid.UUID:
    # Malformed ids are indistinguishable from missing records
    try:
        return uuid.UUID(record_id)
    except ValueError:
        raise _record_not_found()


@router.post("", response_model=RecordResponse, status_code=status.HTTP_201_CREATED)
async def create_record(data: RecordCreate, user: CurrentUser, db: DbSession):
    """Create a new record."""
    record = await RecordService(db).create(user.id, data.text)
    return RecordResponse.model_validate(record)


@router.get("", response_model=RecordListResponse)
async def list_records(user: CurrentUser, db: DbSession):
    """List the current user's records."""
    records = await RecordService(db).list_for_owner(user.id)
    return RecordListResponse(records=[RecordResponse.model_validate(r) for r in records])


@router.get("/{record_id}", response_model=RecordResponse)
async def get_record(record_id: str, user: CurrentUser, db: DbSession):
    record = await RecordService(db).get(user.id, _parse_record_id(record_id))
    if record is None:
        raise _record_not_found()
    return RecordResponse.model_validate(record)


@router.patch("/{record_id}", response_model=RecordResponse)
async def update_record(
    record_id: str,
    data: RecordUpdate,
    user: CurrentUser,
    db: DbSession,
):
    """Update a record's text or completion state."""
    record = await RecordService(db).update(
        user.id,
        _parse_record_id(record_id),
        text=data.text,
        completed=data.completed,
    )
    if record is None:
        raise _record_not_found()
    return RecordResponse.model_validate(record)


@router.delete("/{record_id}", response_model=RecordResponse)
async def delete_record(record_id: str, user: CurrentUser, db: DbSession):
    """Delete a record and return it."""
    record = await RecordService(db).delete(user.id, _parse_record_id(record_id))
    if record is None:
        raise _record_not_found()
    return RecordResponse.model_validate(record)
