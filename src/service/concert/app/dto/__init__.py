"""Application layer DTOs"""

from src.service.concert.app.dto.operation_result import CreateResult, DeleteResult, UpdateResult
from src.service.concert.app.dto.paged_result import PagedResult

__all__ = [
    'CreateResult',
    'DeleteResult',
    'PagedResult',
    'UpdateResult',
]
