"""Outcome wrappers returned by repository write operations."""

from typing import List, Optional

import attrs


@attrs.define(frozen=True)
class UpdateResult:
    success: bool
    error_messages: List[str] = attrs.field(factory=list)

    @classmethod
    def success_result(cls) -> 'UpdateResult':
        return cls(success=True)


@attrs.define(frozen=True)
class DeleteResult:
    success: bool
    error_messages: List[str] = attrs.field(factory=list)

    @classmethod
    def success_result(cls) -> 'DeleteResult':
        return cls(success=True)


@attrs.define(frozen=True)
class CreateResult:
    success: bool
    new_id: Optional[int] = None
    error_messages: List[str] = attrs.field(factory=list)

    @classmethod
    def success_result(cls, *, new_id: int) -> 'CreateResult':
        return cls(success=True, new_id=new_id)
