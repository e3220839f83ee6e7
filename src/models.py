import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from src.constants import (
    MSG_STAGE,
    SAVED_FILE_PREFIX,
    SAVED_FILE_TIMESTAMP,
    SAVED_HEADER_TIMESTAMP,
    SAVED_TEMPLATE,
)

logger = logging.getLogger(__name__)

StatusSink = Callable[[str], None]


@dataclass(frozen=True)
class TranscriptionRequest:
    audio_path: Path
    requires_refinement: bool
    refinement_prompt: str
    status_sink: Optional[StatusSink] = None

    @property
    def file_name(self) -> str:
        return self.audio_path.name


@dataclass(frozen=True)
class PipelineOutcome:
    original_text: Optional[str]
    final_text: str


@dataclass(frozen=True)
class SavedTranscript:
    source_file_name: str
    raw_text: str
    created_at: datetime

    def file_stem(self) -> str:
        return SAVED_FILE_PREFIX + self.created_at.strftime(SAVED_FILE_TIMESTAMP)

    def render(self) -> str:
        return SAVED_TEMPLATE.format(
            saved_at=self.created_at.strftime(SAVED_HEADER_TIMESTAMP),
            file_name=self.source_file_name,
            text=self.raw_text,
        )


class PipelineStage(Enum):
    VALIDATING = 0
    UPLOADING = 1
    AWAITING_TRANSCRIPTION = 2
    AWAITING_REFINEMENT = 3
    COMPLETED = 4
    FAILED = 5

    @property
    def terminal(self) -> bool:
        return self in (PipelineStage.COMPLETED, PipelineStage.FAILED)


@dataclass
class StageTracker:
    """Per-request stage record; stages only ever move forward."""

    history: list[PipelineStage] = field(default_factory=lambda: [PipelineStage.VALIDATING])

    @property
    def current(self) -> PipelineStage:
        return self.history[-1]

    def advance(self, stage: PipelineStage) -> None:
        match self.current:
            case current if current.terminal:
                raise RuntimeError(f"Pipeline already finished in {current.name}")
            case current if not stage.terminal and stage.value <= current.value:
                raise RuntimeError(f"Cannot move from {current.name} back to {stage.name}")
            case _:
                pass
        logger.debug(MSG_STAGE, stage.name)
        self.history.append(stage)
