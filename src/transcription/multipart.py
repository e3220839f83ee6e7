"""Multipart/form-data encoder for the transcription upload.

The byte layout is fixed: model part, optional prompt part, file part, then
the closing delimiter. Nothing here touches the network.
"""
import uuid
from pathlib import PurePath
from typing import NamedTuple, Optional

from src.constants import AUDIO_MIME_TYPES, BOUNDARY_PREFIX, DEFAULT_AUDIO_MIME

CRLF = b"\r\n"


class MultipartBody(NamedTuple):
    boundary: str
    data: bytes

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"


def new_boundary() -> str:
    return BOUNDARY_PREFIX + str(uuid.uuid4()).upper()


def audio_content_type(file_name: str) -> str:
    """MIME type for an audio file name, keyed on its lower-cased extension."""
    extension = PurePath(file_name).suffix.lower().lstrip(".")
    return AUDIO_MIME_TYPES.get(extension, DEFAULT_AUDIO_MIME)


def _field(boundary: str, name: str, value: str) -> bytes:
    return (
        f"--{boundary}\r\n"
        f'Content-Disposition: form-data; name="{name}"\r\n\r\n'
        f"{value}\r\n"
    ).encode()


def encode_multipart(
    model: str,
    prompt: str,
    audio: bytes,
    file_name: str,
    boundary: Optional[str] = None,
) -> MultipartBody:
    boundary = boundary or new_boundary()
    parts = [_field(boundary, "model", model)]
    match prompt:
        case "":
            pass
        case text:
            parts.append(_field(boundary, "prompt", text))
    parts.append(
        (
            f"--{boundary}\r\n"
            f'Content-Disposition: form-data; name="file"; filename="{file_name}"\r\n'
            f"Content-Type: {audio_content_type(file_name)}\r\n\r\n"
        ).encode()
    )
    parts.append(audio)
    parts.append(CRLF)
    parts.append(f"--{boundary}--\r\n".encode())
    return MultipartBody(boundary=boundary, data=b"".join(parts))
