from abc import ABC, abstractmethod

class IFileDownload(ABC):
    @abstractmethod
    def deliver(self, content: str, filename: str, mime_type: str) -> None:
        """Hands generated text to the user as a named file. Fire-and-forget."""
        pass
