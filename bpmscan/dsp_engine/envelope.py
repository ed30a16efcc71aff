"""Amplitude envelope: full-wave rectification plus one-pole smoothing.

The smoother is the causal recurrence

    env[0] = |x[0]|
    env[i] = a * |x[i]| + (1 - a) * env[i - 1]

evaluated in a single left-to-right pass in float32. It is run through
``scipy.signal.lfilter`` over samples 1..N-1 with the filter state seeded
from ``env[0]``, so ``env[0]`` is copied through bit for bit.
"""
from __future__ import annotations

import numpy as np
from scipy.signal import lfilter


def rectify(x: np.ndarray) -> np.ndarray:
  return np.abs(np.asarray(x, dtype=np.float32))


def smooth(rectified: np.ndarray, coefficient: float = 0.1) -> np.ndarray:
  """Apply the causal one-pole smoother to an already rectified signal."""
  x = np.asarray(rectified, dtype=np.float32)
  if x.size == 0:
    return x.copy()

  a = np.float32(coefficient)
  b_coeffs = np.array([a], dtype=np.float32)
  a_coeffs = np.array([1.0, -(np.float32(1.0) - a)], dtype=np.float32)
  y = np.empty_like(x)
  y[0] = x[0]
  if x.size > 1:
    # state carries (1 - a) * env[i - 1] into step i
    zi = np.array([(np.float32(1.0) - a) * x[0]], dtype=np.float32)
    rest, _ = lfilter(b_coeffs, a_coeffs, x[1:], zi=zi)
    y[1:] = rest
  return y


def extract_envelope(mono: np.ndarray, smoothing: float = 0.1) -> np.ndarray:
  """Rectify and smooth a mono signal. Output is non-negative, same length."""
  return smooth(rectify(mono), smoothing)
