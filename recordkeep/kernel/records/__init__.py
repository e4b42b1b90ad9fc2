"""Records - the user-owned entries managed by the service."""

from recordkeep.kernel.records.record_service import RecordService

__all__ = ["RecordService"]
