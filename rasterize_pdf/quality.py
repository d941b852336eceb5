"""Quality tiers: render scale plus JPEG compression settings."""

from __future__ import annotations

from dataclasses import dataclass


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


@dataclass(frozen=True)
class QualityProfile:
    """Rendering parameters for one quality tier.

    ``scale`` multiplies the page's intrinsic size (in points) to get the raster
    size in pixels, so it is the only knob for both fidelity and memory/CPU per
    page. ``compression_quality`` is in ``[0, 1]``.
    """

    name: str
    scale: float
    compression_quality: float
    encoding: str = "JPEG"

    def __post_init__(self) -> None:
        if self.scale <= 0:
            raise ValueError(f"scale must be positive, got {self.scale}")
        if not 0.0 <= self.compression_quality <= 1.0:
            raise ValueError(
                f"compression_quality must be within [0, 1], got {self.compression_quality}"
            )
        if self.encoding != "JPEG":
            raise ValueError(f"Unsupported encoding: {self.encoding}")

    @property
    def jpeg_quality(self) -> int:
        # Pillow quality above 95 mostly grows the file.
        return int(_clamp(round(self.compression_quality * 100), 1, 95))


QUALITY_PROFILES: dict[str, QualityProfile] = {
    "high": QualityProfile("high", scale=2.0, compression_quality=0.95),
    "medium": QualityProfile("medium", scale=1.5, compression_quality=0.85),
    "low": QualityProfile("low", scale=1.0, compression_quality=0.75),
}

DEFAULT_QUALITY = "high"


def get_profile(quality: str | QualityProfile) -> QualityProfile:
    if isinstance(quality, QualityProfile):
        return quality
    try:
        return QUALITY_PROFILES[quality]
    except KeyError:
        valid = ", ".join(QUALITY_PROFILES)
        raise ValueError(f"Unknown quality tier {quality!r}. Expected one of: {valid}") from None
