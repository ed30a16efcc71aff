"""Channel downmix for tempo analysis."""
from __future__ import annotations

import numpy as np


def downmix(samples: np.ndarray, channels: int) -> np.ndarray:
  """Collapse an interleaved buffer to one amplitude per frame.

  Mono input is returned as-is (same object). For two or more channels
  only channels 0 and 1 are averaged; any further channels are ignored.
  """
  if channels == 1:
    return samples

  frames = np.asarray(samples, dtype=np.float32).reshape(-1, channels)
  return ((frames[:, 0] + frames[:, 1]) / np.float32(2.0)).astype(np.float32)
