from abc import ABC, abstractmethod

class BaseOutput(ABC):
    @abstractmethod
    def write(self, transactions, year=None, month=None, opening_balance=0.0):
        """
        Write transactions, optionally limited to one month, to the sink.
        ``opening_balance`` is the balance carried in from earlier months.
        """
        pass
