"""Greedy peak picking on the amplitude envelope.

A sample is a candidate when it is a strict local maximum above the
threshold. Candidates are then walked left to right and one is kept only
if it lies more than ``min_gap`` samples after the last kept peak, so the
first peak in a cluster always wins even if a later one is taller.
The two endpoints are never tested.
"""
from __future__ import annotations

import numpy as np


def find_candidates(envelope: np.ndarray, threshold: float) -> np.ndarray:
  """Indices of strict local maxima above ``threshold``, endpoints excluded."""
  env = np.asarray(envelope, dtype=np.float32)
  if env.size < 3:
    return np.empty(0, dtype=np.int64)

  centre = env[1:-1]
  mask = (centre > env[:-2]) & (centre > env[2:]) & (centre > np.float32(threshold))
  return np.flatnonzero(mask).astype(np.int64) + 1


def detect_peaks(envelope: np.ndarray, threshold: float = 0.05, min_gap: int = 500) -> np.ndarray:
  """Return accepted peak indices in strictly increasing order."""
  peaks: list[int] = []
  for idx in find_candidates(envelope, threshold):
    i = int(idx)
    if not peaks or (i - peaks[-1]) > min_gap:
      peaks.append(i)
  return np.asarray(peaks, dtype=np.int64)
