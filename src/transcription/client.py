"""TranscriptionClient — abstract base for speech-to-text backends."""
from abc import ABC, abstractmethod


class TranscriptionClient(ABC):
    @abstractmethod
    async def transcribe(self, audio: bytes, file_name: str) -> str:
        """Convert raw audio bytes to text. Raises a PipelineError on failure."""
        ...
