from abc import ABC, abstractmethod

class BaseLoader(ABC):
    @abstractmethod
    def load(self, file_path: str, categories: dict | None = None):
        """
        Yield keyword mappings accepted by LedgerStore.add from file_path.
        categories is the configured keyword map used to fill in missing
        categories.
        """
        pass
