"""Audio decode boundary.

Everything that touches containers goes through ``soundfile`` (libsndfile)
and comes out as an interleaved float32 buffer plus its metadata. Failures
are raised as ``DecodeError`` subclasses whose ``str()`` is the line the
batch runner reports for that file.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import BinaryIO

import numpy as np
import soundfile as sf

logger = logging.getLogger("bpmscan.decoding")


class DecodeError(Exception):
    """Base class for any file-level failure before analysis starts."""

    def __init__(self, path: str, message: str):
        super().__init__(message)
        self.path = path


class AudioFileNotFoundError(DecodeError):
    def __init__(self, path: str):
        super().__init__(path, f"File not found: {path}")


class AudioOpenError(DecodeError):
    def __init__(self, path: str, diagnostic: str):
        super().__init__(path, f"Error opening file: {path} ({diagnostic})")
        self.diagnostic = diagnostic


class InvalidAudioError(DecodeError):
    def __init__(self, path: str):
        super().__init__(path, f"Invalid file: {path} (frames or channels is zero)")


class AudioReadError(DecodeError):
    def __init__(self, path: str, expected: int, actual: int):
        super().__init__(path, f"Error reading samples from {path}")
        self.expected = expected
        self.actual = actual


@dataclass
class DecodedAudio:
    path: str
    samples: np.ndarray  # interleaved float32, length frames * channels
    frames: int
    channels: int
    sample_rate: int

    @property
    def duration_sec(self) -> float:
        return self.frames / float(self.sample_rate) if self.sample_rate else 0.0


def _read_all(snd: sf.SoundFile, name: str) -> DecodedAudio:
    frames = int(snd.frames)
    channels = int(snd.channels)
    sample_rate = int(snd.samplerate)

    logger.info("[DECODE] Processing file: %s (%d frames, %d ch, %d Hz)", name, frames, channels, sample_rate)

    if frames <= 0 or channels <= 0:
        raise InvalidAudioError(name)

    # always_2d gives [frames, channels]; flattening in C order restores
    # the interleaved layout libsndfile reads natively.
    data = snd.read(frames, dtype="float32", always_2d=True)
    if data.shape[0] != frames:
        logger.warning("[DECODE] Short read for %s: expected %d frames, got %d", name, frames, data.shape[0])
        raise AudioReadError(name, frames, int(data.shape[0]))

    return DecodedAudio(
        path=name,
        samples=np.ascontiguousarray(data, dtype=np.float32).reshape(-1),
        frames=frames,
        channels=channels,
        sample_rate=sample_rate,
    )


def decode(path: str) -> DecodedAudio:
    """Decode an audio file on disk into an interleaved float32 buffer."""

    if not os.path.exists(path):
        raise AudioFileNotFoundError(path)

    try:
        snd = sf.SoundFile(path)
    except sf.SoundFileError as exc:
        raise AudioOpenError(path, str(exc)) from exc

    with snd:
        return _read_all(snd, path)


def decode_stream(stream: BinaryIO, name: str) -> DecodedAudio:
    """Decode an already-open binary stream (e.g. an HTTP upload)."""

    try:
        snd = sf.SoundFile(stream)
    except sf.SoundFileError as exc:
        raise AudioOpenError(name, str(exc)) from exc

    with snd:
        return _read_all(snd, name)

