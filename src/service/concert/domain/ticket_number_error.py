from src.platform.exception.exceptions import DomainError


class InsufficientUnsoldTicketNumbersError(DomainError):
    """Shrinking a ticket-number pool would require deleting sold numbers."""

    def __init__(self, *, concert_id: int, requested: int, unsold: int) -> None:
        super().__init__('Unable to delete sold tickets')
        self.concert_id = concert_id
        self.requested = requested
        self.unsold = unsold
