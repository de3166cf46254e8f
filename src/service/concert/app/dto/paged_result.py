from typing import Generic, List, TypeVar

import attrs


T = TypeVar('T')


@attrs.define(frozen=True)
class PagedResult(Generic[T]):
    page_of_data: List[T]
    total_count: int
