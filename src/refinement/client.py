"""RefinementClient — abstract base for text clean-up backends."""
from abc import ABC, abstractmethod


class RefinementClient(ABC):
    @abstractmethod
    async def refine(self, text: str, instruction: str) -> str:
        """Rewrite ``text`` following ``instruction``. Raises a PipelineError on failure."""
        ...
