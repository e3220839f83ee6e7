from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import os
from dotenv import load_dotenv

from src.constants import (
    MAX_UPLOAD_MB,
    REFINEMENT_BASE_URL,
    REFINEMENT_MAX_TOKENS,
    REFINEMENT_MODEL,
    REFINEMENT_TEMPERATURE,
    REFINEMENT_TIMEOUT,
    SAVED_TRANSCRIPTIONS_DIRNAME,
    TRANSCRIPTION_ENDPOINT,
    TRANSCRIPTION_TIMEOUT,
    WHISPER_MODEL,
)


def default_saved_dir() -> Path:
    return Path.home() / "Documents" / SAVED_TRANSCRIPTIONS_DIRNAME


@dataclass(frozen=True)
class Config:
    openai_api_key: Optional[str]
    log_level: str
    transcription_endpoint: str
    transcription_model: str
    transcription_prompt: str
    transcription_timeout: int
    refinement_base_url: str
    refinement_model: str
    refinement_temperature: float
    refinement_max_tokens: int
    refinement_timeout: int
    max_upload_mb: float
    saved_transcriptions_dir: Path

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        openai_api_key = os.getenv("OPENAI_API_KEY") or None
        log_level = os.getenv("LOG_LEVEL", "INFO")
        endpoint = os.getenv("TRANSCRIPTION_ENDPOINT") or TRANSCRIPTION_ENDPOINT
        model = os.getenv("TRANSCRIPTION_MODEL") or WHISPER_MODEL
        prompt = os.getenv("TRANSCRIPTION_PROMPT", "")
        base_url = os.getenv("REFINEMENT_BASE_URL") or REFINEMENT_BASE_URL
        refinement_model = os.getenv("REFINEMENT_MODEL") or REFINEMENT_MODEL
        saved_dir = os.getenv("SAVED_TRANSCRIPTIONS_DIR") or None

        return cls._validate(
            openai_api_key=openai_api_key,
            log_level=log_level,
            transcription_endpoint=endpoint,
            transcription_model=model,
            transcription_prompt=prompt,
            transcription_timeout=_number("TRANSCRIPTION_TIMEOUT", TRANSCRIPTION_TIMEOUT, int),
            refinement_base_url=base_url,
            refinement_model=refinement_model,
            refinement_temperature=_number("REFINEMENT_TEMPERATURE", REFINEMENT_TEMPERATURE, float),
            refinement_max_tokens=_number("REFINEMENT_MAX_TOKENS", REFINEMENT_MAX_TOKENS, int),
            refinement_timeout=_number("REFINEMENT_TIMEOUT", REFINEMENT_TIMEOUT, int),
            max_upload_mb=_number("MAX_UPLOAD_MB", MAX_UPLOAD_MB, float),
            saved_transcriptions_dir=(
                Path(saved_dir).expanduser() if saved_dir else default_saved_dir()
            ),
        )

    @staticmethod
    def _validate(
        openai_api_key: Optional[str],
        log_level: str,
        transcription_endpoint: str,
        transcription_model: str,
        transcription_prompt: str,
        transcription_timeout: int,
        refinement_base_url: str,
        refinement_model: str,
        refinement_temperature: float,
        refinement_max_tokens: int,
        refinement_timeout: int,
        max_upload_mb: float,
        saved_transcriptions_dir: Path,
    ) -> "Config":
        positives = {
            "TRANSCRIPTION_TIMEOUT": transcription_timeout,
            "REFINEMENT_TIMEOUT": refinement_timeout,
            "REFINEMENT_MAX_TOKENS": refinement_max_tokens,
            "MAX_UPLOAD_MB": max_upload_mb,
        }
        for name, value in positives.items():
            match value:
                case v if v <= 0:
                    raise ValueError(f"{name} must be positive, got {v}")
                case _:
                    pass

        match refinement_temperature:
            case t if not 0 <= t <= 2:
                raise ValueError(f"REFINEMENT_TEMPERATURE must be between 0 and 2, got {t}")
            case _:
                pass

        return Config(
            openai_api_key=openai_api_key,
            log_level=log_level,
            transcription_endpoint=transcription_endpoint,
            transcription_model=transcription_model,
            transcription_prompt=transcription_prompt,
            transcription_timeout=transcription_timeout,
            refinement_base_url=refinement_base_url,
            refinement_model=refinement_model,
            refinement_temperature=refinement_temperature,
            refinement_max_tokens=refinement_max_tokens,
            refinement_timeout=refinement_timeout,
            max_upload_mb=max_upload_mb,
            saved_transcriptions_dir=saved_transcriptions_dir,
        )


def _number(name: str, default, kind):
    raw = os.getenv(name)
    match raw:
        case None | "":
            return default
        case text:
            try:
                return kind(text)
            except ValueError:
                raise ValueError(f"{name} must be a number, got {text!r}") from None
