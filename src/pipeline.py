"""TranscriptionPipeline — drives transcription, optional refinement and recovery."""
import asyncio
import logging
from pathlib import Path
from typing import Optional

import httpx

from src.config import Config
from src.constants import (
    DEFAULT_REFINEMENT_PROMPT,
    MSG_FILE_SIZE,
    MSG_FILE_TOO_LARGE,
    MSG_MOVING_TO_STEP_TWO,
    MSG_NOT_PRESERVED,
    MSG_PREPARING,
    MSG_PRESERVED,
    MSG_REFINEMENT_COMPLETE,
    MSG_REFINEMENT_FAILED,
    MSG_REFINEMENT_TIMEOUT,
    MSG_SENDING_AUDIO,
    MSG_SENDING_REFINEMENT,
    MSG_TRANSCRIPTION_COMPLETE,
    MSG_TRANSCRIPTION_FAILED,
    MSG_TRANSCRIPTION_TIMEOUT,
    STEP_ONE,
)
from src.credentials import CredentialProvider, EnvCredentialProvider
from src.errors import FileTooLarge, MissingCredentialError, NoData, PipelineError, TransportFailure
from src.models import (
    PipelineOutcome,
    PipelineStage,
    StageTracker,
    StatusSink,
    TranscriptionRequest,
)
from src.recovery import RecoveryStore
from src.refinement.client import RefinementClient
from src.refinement.openai import OpenAIRefinementClient
from src.status import StatusReporter
from src.transcription.client import TranscriptionClient
from src.transcription.whisper import WhisperTranscriptionClient
from src.validation import check_size, measure_audio

logger = logging.getLogger(__name__)


def _step_one(request: TranscriptionRequest, message: str) -> str:
    return STEP_ONE + message if request.requires_refinement else message


class TranscriptionPipeline:
    """Two-phase audio → text service.

    Holds configuration and collaborators only; every ``submit`` call keeps its
    own state, so independent requests may run concurrently.
    """

    def __init__(
        self,
        config: Config,
        credentials: Optional[CredentialProvider] = None,
        *,
        recovery: Optional[RecoveryStore] = None,
        transcriber: Optional[TranscriptionClient] = None,
        refiner: Optional[RefinementClient] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._config = config
        self._credentials = credentials or EnvCredentialProvider(config)
        self._recovery = recovery or RecoveryStore(config.saved_transcriptions_dir)
        self._transcriber = transcriber
        self._refiner = refiner
        self._http_client = http_client

    @property
    def recovery(self) -> RecoveryStore:
        return self._recovery

    async def submit(
        self,
        audio_path: Path | str,
        requires_refinement: bool = False,
        refinement_prompt: str = DEFAULT_REFINEMENT_PROMPT,
        status_sink: Optional[StatusSink] = None,
    ) -> PipelineOutcome:
        request = TranscriptionRequest(
            audio_path=Path(audio_path),
            requires_refinement=requires_refinement,
            refinement_prompt=refinement_prompt,
            status_sink=status_sink,
        )
        transcriber, refiner = self._clients(request)
        status = StatusReporter(request.status_sink)
        stages = StageTracker()
        try:
            return await self._run(request, transcriber, refiner, status, stages)
        except PipelineError as exc:
            stages.advance(PipelineStage.FAILED)
            logger.error("Pipeline failed for %s: %s", request.file_name, exc)
            raise

    # ── collaborators ─────────────────────────────────────────────────────────

    def _clients(
        self, request: TranscriptionRequest
    ) -> tuple[TranscriptionClient, Optional[RefinementClient]]:
        needs_refiner = request.requires_refinement and self._refiner is None
        match (self._transcriber, needs_refiner):
            case (TranscriptionClient() as transcriber, False):
                return transcriber, self._refiner
            case _:
                pass

        api_key = (self._credentials.api_key() or "").strip()
        match api_key:
            case "":
                raise MissingCredentialError("No API key configured for the transcription provider")
            case _:
                pass

        config = self._config
        transcriber = self._transcriber or WhisperTranscriptionClient(
            api_key,
            endpoint=config.transcription_endpoint,
            model=config.transcription_model,
            prompt=config.transcription_prompt,
            timeout=config.transcription_timeout,
            http_client=self._http_client,
        )
        refiner = self._refiner or OpenAIRefinementClient(
            api_key,
            base_url=config.refinement_base_url,
            model=config.refinement_model,
            temperature=config.refinement_temperature,
            max_tokens=config.refinement_max_tokens,
            timeout=config.refinement_timeout,
            http_client=self._http_client,
        )
        return transcriber, refiner

    # ── stages ────────────────────────────────────────────────────────────────

    async def _run(
        self,
        request: TranscriptionRequest,
        transcriber: TranscriptionClient,
        refiner: Optional[RefinementClient],
        status: StatusReporter,
        stages: StageTracker,
    ) -> PipelineOutcome:
        audio = await self._validate(request, status)

        stages.advance(PipelineStage.UPLOADING)
        status.emit(_step_one(request, MSG_PREPARING % request.file_name))
        status.emit(_step_one(request, MSG_SENDING_AUDIO))

        stages.advance(PipelineStage.AWAITING_TRANSCRIPTION)
        raw = await self._transcribe(request, transcriber, audio, status)

        match (request.requires_refinement, refiner):
            case (True, None):
                raise RuntimeError("Refinement requested but no refinement client is available")
            case (True, _):
                pass
            case (False, _):
                status.emit(MSG_TRANSCRIPTION_COMPLETE)
                stages.advance(PipelineStage.COMPLETED)
                return PipelineOutcome(original_text=None, final_text=raw)

        stages.advance(PipelineStage.AWAITING_REFINEMENT)
        status.emit(MSG_MOVING_TO_STEP_TWO)
        refined = await self._refine(request, refiner, raw, status)
        status.emit(MSG_REFINEMENT_COMPLETE)
        stages.advance(PipelineStage.COMPLETED)
        return PipelineOutcome(original_text=raw, final_text=refined)

    async def _validate(self, request: TranscriptionRequest, status: StatusReporter) -> bytes:
        size_mb = await measure_audio(request.audio_path)
        status.emit(MSG_FILE_SIZE % size_mb)
        try:
            check_size(size_mb, self._config.max_upload_mb)
        except FileTooLarge:
            status.emit(MSG_FILE_TOO_LARGE % size_mb)
            raise
        try:
            return await asyncio.to_thread(request.audio_path.read_bytes)
        except OSError as exc:
            logger.error("Could not read %s: %s", request.audio_path, exc)
            raise NoData() from exc

    async def _transcribe(
        self,
        request: TranscriptionRequest,
        transcriber: TranscriptionClient,
        audio: bytes,
        status: StatusReporter,
    ) -> str:
        try:
            return await transcriber.transcribe(audio, request.file_name)
        except PipelineError as exc:
            status.emit(MSG_TRANSCRIPTION_FAILED % exc)
            match exc:
                case TransportFailure() as failure if failure.timed_out:
                    status.emit(MSG_TRANSCRIPTION_TIMEOUT)
                case _:
                    pass
            raise

    async def _refine(
        self,
        request: TranscriptionRequest,
        refiner: RefinementClient,
        raw: str,
        status: StatusReporter,
    ) -> str:
        status.emit(MSG_SENDING_REFINEMENT)
        instruction = request.refinement_prompt.strip() or DEFAULT_REFINEMENT_PROMPT
        try:
            return await refiner.refine(raw, instruction)
        except PipelineError as exc:
            match exc:
                case TransportFailure() as failure if failure.timed_out:
                    status.emit(MSG_REFINEMENT_TIMEOUT)
                case _:
                    status.emit(MSG_REFINEMENT_FAILED % exc)
            saved = await self._recovery.save(request.file_name, raw)
            match saved:
                case None:
                    status.emit(MSG_NOT_PRESERVED % raw)
                case path:
                    status.emit(MSG_PRESERVED % path)
            raise
