"""Peak spacing to BPM.

All arithmetic stays in float32: intervals are accumulated in order
(not pairwise), and the mean, the 60/mean and the calibration divide are
each rounded to float32.
"""
from __future__ import annotations

import numpy as np


def raw_bpm(peaks: np.ndarray, sample_rate: int) -> float:
  """60 / mean inter-peak interval in seconds; 0.0 with fewer than 2 peaks."""
  if sample_rate <= 0:
    raise ValueError(f"sample_rate must be positive, got {sample_rate}")

  p = np.asarray(peaks, dtype=np.int64)
  if p.size < 2:
    return 0.0

  intervals = np.diff(p).astype(np.float32) / np.float32(sample_rate)
  total = np.cumsum(intervals, dtype=np.float32)[-1]
  avg_interval = np.float32(total / np.float32(p.size - 1))
  return float(np.float32(np.float32(60.0) / avg_interval))


def estimate_bpm(peaks: np.ndarray, sample_rate: int, calibration: float = 35.0) -> float:
  """Calibrated tempo estimate; 0.0 means not enough peaks to tell."""
  bpm = raw_bpm(peaks, sample_rate)
  if bpm == 0.0:
    return 0.0
  return float(np.float32(np.float32(bpm) / np.float32(calibration)))
