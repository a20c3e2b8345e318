from typing import Any, Dict, Optional

from pydantic import BaseModel

ROOM_MISSING = "room_missing"


class PurgeResult(BaseModel):
    ok: bool = True
    deleted: int = 0
    skipped: int = 0
    reason: Optional[str] = None

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class CallableRequest(BaseModel):
    """Envelope of the callable protocol: the payload travels under ``data``."""
    data: Any = None
