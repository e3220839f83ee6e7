"""Closed error taxonomy for the transcription pipeline.

Every failure the pipeline reports is one of the eight ``PipelineError``
subclasses below. Payload-carrying kinds declare ``__match_args__`` so callers
can dispatch on them with a ``match`` statement.
"""


class PipelineError(Exception):
    """Base class for every failure reported by ``TranscriptionPipeline``."""


class InvalidEndpoint(PipelineError):
    __match_args__ = ("url",)

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Invalid API endpoint: {url}")


class InvalidResponse(PipelineError):
    def __init__(self) -> None:
        super().__init__("Invalid response from server")


class NoData(PipelineError):
    def __init__(self) -> None:
        super().__init__("No data received from server")


class ParsingFailed(PipelineError):
    def __init__(self) -> None:
        super().__init__("Failed to parse server response")


class ApiError(PipelineError):
    __match_args__ = ("message",)

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"API Error: {message}")


class ServerError(PipelineError):
    __match_args__ = ("status_code",)

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"Server Error: HTTP {status_code}")


class FileTooLarge(PipelineError):
    __match_args__ = ("size_mb",)

    def __init__(self, size_mb: float) -> None:
        self.size_mb = size_mb
        super().__init__(
            f"Audio file is too large ({size_mb:.1f}MB). Maximum size is 25MB."
        )


class TransportFailure(PipelineError):
    __match_args__ = ("message",)

    def __init__(self, message: str, timed_out: bool = False) -> None:
        self.message = message
        self._timed_out = timed_out
        super().__init__(f"Network error: {message}")

    @property
    def timed_out(self) -> bool:
        lowered = self.message.lower()
        return self._timed_out or "timed out" in lowered or "timeout" in lowered


class MissingCredentialError(ValueError):
    """No API key available — a configuration problem, not a pipeline failure."""


def describe_error(error: PipelineError) -> str:
    """One-line, user-facing summary of a pipeline failure."""
    match error:
        case FileTooLarge(size_mb):
            return f"File too large ({size_mb:.1f} MB) — resubmit a smaller recording"
        case ApiError(message):
            return f"Provider rejected the request: {message}"
        case ServerError(status_code):
            return f"Provider returned HTTP {status_code}"
        case TransportFailure() as failure if failure.timed_out:
            return f"Request timed out: {failure.message}"
        case TransportFailure(message):
            return f"Network error: {message}"
        case InvalidEndpoint(url):
            return f"Invalid API endpoint: {url}"
        case InvalidResponse() | NoData() | ParsingFailed():
            return str(error)
        case _:
            return str(error)
