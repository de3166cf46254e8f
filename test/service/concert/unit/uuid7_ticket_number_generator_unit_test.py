import pytest

from src.service.concert.driven_adapter.generator.uuid7_ticket_number_generator import (
    Uuid7TicketNumberGenerator,
)


@pytest.mark.unit
class TestUuid7TicketNumberGenerator:
    def test_numbers_are_32_uppercase_hex_chars(self):
        number = Uuid7TicketNumberGenerator().generate()

        assert len(number) == 32
        assert number == number.upper()
        int(number, 16)

    def test_numbers_are_unique(self):
        generator = Uuid7TicketNumberGenerator()

        numbers = {generator.generate() for _ in range(1000)}

        assert len(numbers) == 1000
