import math
import sys

from engine.rng import DAY_STRIDE, SeedStream, pseudo_random, scaled
from shared.utils.hashing import hash32, utf16_units
from shared.utils.precision import clamp_float, format_decimal, round_cents, snap_to_decimals


def test_pseudo_random_is_deterministic_and_in_unit_interval():
    for seed in range(-500, 500):
        r = pseudo_random(seed)
        assert 0.0 <= r < 1.0
        assert r == pseudo_random(seed)
    assert pseudo_random(0) == 0.0
    assert math.isclose(pseudo_random(1), 0.709848078965, abs_tol=1e-6)


def test_scaled_maps_into_range():
    for seed in range(100):
        v = scaled(seed, -5, 15)
        assert -5 <= v <= 15


def test_seed_stream_daily_uses_day_stride():
    stream = SeedStream(1234)
    assert stream.daily(3, 2) == stream.draw(3 * DAY_STRIDE + 2)
    assert stream.draw(1) == pseudo_random(1235)
    # 负 seed 取绝对值
    assert SeedStream(-1234).draw(0) == pseudo_random(1234)


def test_hash32_matches_polynomial_hash():
    assert hash32("") == 0
    assert hash32("a") == 97
    assert hash32("ab") == 97 * 31 + 98
    assert hash32("hello") == 99162322


def test_hash32_wraps_to_signed_int32():
    text = "DualMA-300539.SZ-" + "x" * 200
    h = hash32(text)
    assert -(2**31) <= h < 2**31
    assert h == hash32(text)


def test_utf16_units_split_surrogate_pairs():
    assert utf16_units("A中") == [0x41, 0x4E2D]
    assert utf16_units("😀") == [0xD83D, 0xDE00]


def test_precision_helpers():
    assert snap_to_decimals(0.1 + 0.2, 2) == 0.3
    assert round_cents(1234.5678) == 1234.57
    assert format_decimal(10.0) == "10"
    assert format_decimal(1.5) == "1.5"
    assert format_decimal(1e-05) == "0.00001"
    assert format_decimal(-3.25) == "-3.25"
    assert "e" not in format_decimal(1.5e16)


def test_clamp_float_saturates_huge_ints():
    assert clamp_float(100000) == 100000.0
    assert clamp_float(10**400) == sys.float_info.max
    assert clamp_float(-(10**400)) == -sys.float_info.max
