import numpy as np
import pytest

from pcmwav.exceptions import InvalidArgument
from pcmwav.volume import average_power, level_from_power, volume_level


def test_silence_is_zero() -> None:
    assert volume_level([np.zeros(1024, dtype=np.float32)]) == 0
    assert volume_level([np.zeros(512), np.zeros(512)]) == 0


def test_empty_frame_is_zero() -> None:
    assert volume_level([]) == 0
    assert volume_level([[]]) == 0


def test_linear_region_for_quiet_signal() -> None:
    # 0.01 * 32767 -> 327
    assert average_power([[0.01] * 100]) == 327.0
    assert volume_level([[0.01] * 100]) == 3


def test_log_region_for_louder_signal() -> None:
    # 0.1 * 32767 -> 3276, (1 + log10(0.3276)) * 100 = 51.5
    assert volume_level([[0.1] * 100]) == 52


def test_full_scale_is_clamped_to_100() -> None:
    assert volume_level([[1.0, -1.0] * 50]) == 100


def test_regions_meet_without_a_drop() -> None:
    assert level_from_power(1250) == 10
    assert level_from_power(1251) == 10
    assert level_from_power(0) == 0


def test_level_is_monotonic_in_magnitude() -> None:
    previous = -1
    for amplitude in np.linspace(0.0, 1.0, 201):
        level = volume_level([np.full(64, amplitude), np.full(64, amplitude)])
        assert 0 <= level <= 100
        assert level >= previous
        previous = level


def test_channels_are_averaged_before_metering() -> None:
    assert volume_level([[0.1] * 10, [-0.1] * 10]) == 0


def test_mismatched_channel_lengths() -> None:
    with pytest.raises(InvalidArgument):
        volume_level([[0.1] * 10, [0.1] * 9])
