import pytest

from src.errors import FileTooLarge, InvalidEndpoint, NoData
from src.validation import check_endpoint, check_size, measure_audio


async def test_measure_audio_reports_megabytes(tmp_path):
    audio = tmp_path / "a.wav"
    audio.write_bytes(b"\0" * (1024 * 1024 * 2))

    assert await measure_audio(audio) == 2.0


async def test_measure_missing_file_is_no_data(tmp_path):
    with pytest.raises(NoData):
        await measure_audio(tmp_path / "missing.wav")


def test_check_size_at_limit_passes():
    check_size(25.0, 25.0)


def test_check_size_over_limit_raises_with_size():
    with pytest.raises(FileTooLarge) as info:
        check_size(25.5, 25.0)

    assert info.value.size_mb == 25.5
    assert "25.5MB" in str(info.value)


@pytest.mark.parametrize(
    "url",
    ["https://api.openai.com/v1", "http://localhost:8080/v1/audio/transcriptions"],
)
def test_check_endpoint_accepts_http_urls(url):
    check_endpoint(url)


@pytest.mark.parametrize("url", ["", "not a url", "ftp://files.example.com", "/v1/audio"])
def test_check_endpoint_rejects_everything_else(url):
    with pytest.raises(InvalidEndpoint):
        check_endpoint(url)
