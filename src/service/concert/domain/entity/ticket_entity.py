from typing import Optional

import attrs

from src.service.concert.domain.entity.concert_entity import Concert


@attrs.define
class Ticket:
    concert_id: int
    user_id: str
    id: Optional[int] = None
    concert: Optional[Concert] = None  # Only populated by ticket listings
