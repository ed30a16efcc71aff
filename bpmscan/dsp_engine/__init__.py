"""Time-domain tempo estimation stages.

Each stage is a pure function over numpy arrays: downmix, envelope
extraction, peak picking and BPM conversion, chained by ``pipeline``.
"""
from .downmix import downmix
from .envelope import extract_envelope
from .peaks import detect_peaks
from .tempo import estimate_bpm, raw_bpm
from .pipeline import TempoReport, analyze_audio, analyze_samples

__all__ = [
  "downmix",
  "extract_envelope",
  "detect_peaks",
  "estimate_bpm",
  "raw_bpm",
  "TempoReport",
  "analyze_audio",
  "analyze_samples",
]
