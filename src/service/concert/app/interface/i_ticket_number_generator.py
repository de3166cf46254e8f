from abc import ABC, abstractmethod


class ITicketNumberGenerator(ABC):
    @abstractmethod
    def generate(self) -> str:
        """Return one ticket number, unique across all concerts"""
        pass
