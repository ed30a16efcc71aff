"""bpmscan: time-domain tempo estimation for folders of audio files.

The pipeline downmixes to mono, takes a smoothed amplitude envelope,
picks spaced peaks and converts their mean spacing to BPM. ``batch``
runs it over a directory; ``cli`` and ``main`` expose it on the command
line and over HTTP.
"""
from .config import TempoConfig
from .decoding import DecodedAudio, DecodeError, decode
from .dsp_engine import TempoReport, analyze_audio, analyze_samples
from .batch import BatchRunner, FileResult, analyze_file, find_audio_files

__all__ = [
    "TempoConfig",
    "DecodedAudio",
    "DecodeError",
    "decode",
    "TempoReport",
    "analyze_audio",
    "analyze_samples",
    "BatchRunner",
    "FileResult",
    "analyze_file",
    "find_audio_files",
]
