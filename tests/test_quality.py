from __future__ import annotations

import pytest

from rasterize_pdf import DEFAULT_QUALITY, QUALITY_PROFILES, QualityProfile, get_profile


def test_profile_table_matches_tiers() -> None:
    assert set(QUALITY_PROFILES) == {"high", "medium", "low"}
    assert (QUALITY_PROFILES["high"].scale, QUALITY_PROFILES["high"].compression_quality) == (2.0, 0.95)
    assert (QUALITY_PROFILES["medium"].scale, QUALITY_PROFILES["medium"].compression_quality) == (1.5, 0.85)
    assert (QUALITY_PROFILES["low"].scale, QUALITY_PROFILES["low"].compression_quality) == (1.0, 0.75)
    assert all(p.encoding == "JPEG" for p in QUALITY_PROFILES.values())
    assert DEFAULT_QUALITY == "high"


def test_jpeg_quality_maps_to_pillow_range() -> None:
    assert QUALITY_PROFILES["high"].jpeg_quality == 95
    assert QUALITY_PROFILES["medium"].jpeg_quality == 85
    assert QUALITY_PROFILES["low"].jpeg_quality == 75
    assert QualityProfile("max", scale=1.0, compression_quality=1.0).jpeg_quality == 95
    assert QualityProfile("min", scale=1.0, compression_quality=0.0).jpeg_quality == 1


def test_profiles_are_immutable() -> None:
    with pytest.raises(AttributeError):
        QUALITY_PROFILES["high"].scale = 3.0  # type: ignore[misc]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"scale": 0, "compression_quality": 0.5},
        {"scale": -1.0, "compression_quality": 0.5},
        {"scale": 1.0, "compression_quality": 1.5},
        {"scale": 1.0, "compression_quality": 0.5, "encoding": "PNG"},
    ],
)
def test_invalid_profiles_rejected(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        QualityProfile("custom", **kwargs)


def test_get_profile() -> None:
    assert get_profile("medium") is QUALITY_PROFILES["medium"]
    custom = QualityProfile("custom", scale=3.0, compression_quality=0.5)
    assert get_profile(custom) is custom
    with pytest.raises(ValueError, match="Unknown quality tier"):
        get_profile("ultra")
