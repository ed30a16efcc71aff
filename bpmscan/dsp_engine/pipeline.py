"""End-to-end tempo pipeline for a single decoded file.

downmix -> envelope -> peaks -> BPM. Every intermediate array is local
to one call, so concurrent calls on different files share nothing.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

import logging

import numpy as np

from ..config import TempoConfig
from ..decoding import DecodedAudio
from .downmix import downmix
from .envelope import extract_envelope
from .peaks import detect_peaks
from .tempo import estimate_bpm, raw_bpm

logger = logging.getLogger("bpmscan.dsp_engine.pipeline")


@dataclass
class TempoReport:
  path: str
  bpm: float
  raw_bpm: float
  peak_count: int
  sample_rate: int
  frames: int
  channels: int
  duration_sec: float

  def to_dict(self) -> Dict[str, Any]:
    return asdict(self)


def analyze_samples(
  samples: np.ndarray,
  channels: int,
  sample_rate: int,
  config: Optional[TempoConfig] = None,
) -> tuple[float, float, int]:
  """Run the pipeline on an interleaved buffer.

  Returns (calibrated_bpm, raw_bpm, peak_count).
  """
  cfg = config or TempoConfig()

  mono = downmix(samples, channels)
  envelope = extract_envelope(mono, cfg.smoothing)
  peaks = detect_peaks(envelope, cfg.threshold, cfg.min_gap)
  raw = raw_bpm(peaks, sample_rate)
  bpm = estimate_bpm(peaks, sample_rate, cfg.calibration)

  logger.debug(
    "[PIPELINE] n=%d peaks=%d raw_bpm=%.3f bpm=%.6f",
    envelope.size,
    peaks.size,
    raw,
    bpm,
  )
  return bpm, raw, int(peaks.size)


def analyze_audio(audio: DecodedAudio, config: Optional[TempoConfig] = None) -> TempoReport:
  bpm, raw, peak_count = analyze_samples(audio.samples, audio.channels, audio.sample_rate, config)
  return TempoReport(
    path=audio.path,
    bpm=bpm,
    raw_bpm=raw,
    peak_count=peak_count,
    sample_rate=audio.sample_rate,
    frames=audio.frames,
    channels=audio.channels,
    duration_sec=audio.duration_sec,
  )
