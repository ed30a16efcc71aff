import numpy as np
import pytest
import soundfile as sf

SR = 44100


def click_track(
    n_clicks: int = 8,
    period: int = SR // 2,
    offset: int = 1000,
    channels: int = 1,
    sr: int = SR,
) -> np.ndarray:
    """Single-sample unit impulses every ``period`` samples, starting at ``offset``."""

    total = offset + period * n_clicks
    x = np.zeros(total, dtype=np.float32)
    x[offset::period] = 1.0
    if channels == 1:
        return x
    return np.repeat(x[:, None], channels, axis=1)


@pytest.fixture
def write_wav(tmp_path):
    def _write(name: str, data: np.ndarray, sr: int = SR) -> str:
        path = tmp_path / name
        sf.write(str(path), data, sr, subtype="FLOAT")
        return str(path)

    return _write


@pytest.fixture
def corrupt_wav(tmp_path):
    path = tmp_path / "broken.wav"
    path.write_bytes(b"RIFF\x00\x00\x00\x00definitely not audio")
    return str(path)
