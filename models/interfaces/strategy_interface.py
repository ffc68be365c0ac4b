from abc import ABC, abstractmethod
from typing import Any

class IValueProcessor(ABC):
    @abstractmethod
    def process(self, value: Any) -> Any:
        """Converts a non-empty raw value into the canonical value for one column type."""
        pass
