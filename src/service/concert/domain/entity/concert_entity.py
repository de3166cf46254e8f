from datetime import datetime
from typing import Optional

import attrs


@attrs.define
class Concert:
    title: str
    artist: str
    start_time: datetime
    genre: str = ''
    location: str = ''
    description: str = ''
    price: float = 0.0
    is_visible: bool = False
    number_of_tickets_for_sale: int = 0
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_on: Optional[datetime] = None
    updated_on: Optional[datetime] = None
    id: Optional[int] = None  # Only None when creating new concert
