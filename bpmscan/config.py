"""Pipeline configuration for tempo estimation.

The heuristic is driven by four constants that were tuned together:
envelope smoothing, peak threshold, minimum peak spacing and the final
calibration divisor. They live here so tests and deployments can override
them without touching the DSP code.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional, Tuple

DEFAULT_THRESHOLD = 0.05
DEFAULT_MIN_GAP = 500
DEFAULT_SMOOTHING = 0.1
# Empirical divisor: the envelope/threshold pipeline finds far more peaks
# than there are beats, so the raw interval BPM is scaled down by this.
DEFAULT_CALIBRATION = 35.0
DEFAULT_EXTENSIONS: Tuple[str, ...] = (".wav", ".mp3")


@dataclass(frozen=True)
class TempoConfig:
    """Tunable constants for a tempo scan.

    Attributes:
        threshold: minimum envelope value a peak must exceed.
        min_gap: a peak is accepted only if it lies strictly more than this
            many samples after the previously accepted one.
        smoothing: one-pole coefficient applied to the rectified signal.
        calibration: divisor applied to the raw inter-peak BPM.
        extensions: lower-case file suffixes picked up by a directory scan.
        max_workers: worker pool size; ``None`` means ``os.cpu_count()``.
        scan_root: directory the HTTP ``/scan`` endpoint is confined to;
            ``None`` means the working directory of the service.
    """

    threshold: float = DEFAULT_THRESHOLD
    min_gap: int = DEFAULT_MIN_GAP
    smoothing: float = DEFAULT_SMOOTHING
    calibration: float = DEFAULT_CALIBRATION
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    max_workers: Optional[int] = None
    scan_root: Optional[str] = None

    def __post_init__(self) -> None:
        if not 0.0 < self.smoothing <= 1.0:
            raise ValueError(f"smoothing must be in (0, 1], got {self.smoothing}")
        if self.min_gap < 0:
            raise ValueError(f"min_gap must be >= 0, got {self.min_gap}")
        if self.calibration <= 0.0:
            raise ValueError(f"calibration must be > 0, got {self.calibration}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

    @property
    def worker_count(self) -> int:
        return self.max_workers or os.cpu_count() or 1

    def with_overrides(self, **changes) -> "TempoConfig":
        return replace(self, **changes)

    @classmethod
    def from_env(cls) -> "TempoConfig":
        """Build a config from ``BPMSCAN_*`` environment variables.

        Unset or empty variables keep their defaults.
        """

        threshold = os.getenv("BPMSCAN_THRESHOLD")
        min_gap = os.getenv("BPMSCAN_MIN_GAP")
        smoothing = os.getenv("BPMSCAN_SMOOTHING")
        calibration = os.getenv("BPMSCAN_CALIBRATION")
        max_workers = os.getenv("BPMSCAN_MAX_WORKERS")
        scan_root = os.getenv("BPMSCAN_SCAN_ROOT")

        return cls(
            threshold=float(threshold) if threshold else DEFAULT_THRESHOLD,
            min_gap=int(min_gap) if min_gap else DEFAULT_MIN_GAP,
            smoothing=float(smoothing) if smoothing else DEFAULT_SMOOTHING,
            calibration=float(calibration) if calibration else DEFAULT_CALIBRATION,
            max_workers=int(max_workers) if max_workers else None,
            scan_root=scan_root or None,
        )
