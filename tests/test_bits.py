import pytest

from floacon.bits import (
    clean_input,
    from_hex,
    invert,
    set_all,
    set_range,
    to_binary_grouped,
    to_hex,
    toggle_bit,
    validate_bits,
    zero_bits,
)
from floacon.datatypes import FormatParams

SINGLE = FormatParams(8, 23)


def test_toggle_bit_flips_single_position() -> None:
    assert toggle_bit("0000", 2) == "0010"
    assert toggle_bit("0010", 2) == "0000"


def test_toggle_bit_out_of_range() -> None:
    with pytest.raises(IndexError):
        toggle_bit("0000", 4)
    with pytest.raises(IndexError):
        toggle_bit("0000", -1)


def test_set_range_fills_to_end() -> None:
    assert set_range("10100", 2, "1") == "10111"
    assert set_range("11111", 1, "0") == "10000"
    assert set_range("0101", 0, "1") == "1111"


def test_set_all_and_invert() -> None:
    assert set_all("0101", "1") == "1111"
    assert set_all("0101", "0") == "0000"
    assert invert("1100") == "0011"


def test_bit_value_must_be_binary_digit() -> None:
    with pytest.raises(ValueError):
        set_all("0101", "2")
    with pytest.raises(ValueError):
        set_range("0101", 1, "x")


def test_zero_bits_matches_total_width() -> None:
    assert zero_bits(FormatParams(2, 2)) == "00000"


def test_validate_bits_rejects_bad_length_and_characters() -> None:
    with pytest.raises(ValueError):
        validate_bits("0" * 31, SINGLE)
    with pytest.raises(ValueError):
        validate_bits("0" * 31 + "2", SINGLE)
    assert validate_bits("1" * 32, SINGLE) == "1" * 32


def test_binary_grouping_splits_fields() -> None:
    bits = "0" + "01111111" + "0" * 23
    assert to_binary_grouped(bits, SINGLE) == "0 01111111 " + "0" * 23


def test_hex_rendering_pads_to_nibble_count() -> None:
    assert to_hex("1" + "1" * 8 + "0" * 23) == "0xFF800000"
    assert to_hex("0" * 32) == "0x00000000"
    assert to_hex("10001") == "0x11"
    assert to_hex("00001") == "0x01"


def test_from_hex_inverts_to_hex() -> None:
    bits = "1" + "1" * 8 + "0" * 23
    assert from_hex("0xFF800000", SINGLE) == bits
    assert from_hex("ff80_0000", SINGLE) == bits
    assert from_hex("0x01", FormatParams(2, 2)) == "00001"


def test_from_hex_rejects_values_that_do_not_fit() -> None:
    with pytest.raises(ValueError):
        from_hex("0x20", FormatParams(2, 2))
    with pytest.raises(ValueError):
        from_hex("0xZZ", SINGLE)
    with pytest.raises(ValueError):
        from_hex("", SINGLE)


def test_clean_input_strips_grouping_characters() -> None:
    assert clean_input(" 0 0111_1111 00 ") == "001111111100"


def test_from_hex_rejects_signs_and_repeated_prefix() -> None:
    params = FormatParams(2, 2)
    for text in ("0x0x1", "+1", "-1", "0x", "1 0x"):
        with pytest.raises(ValueError):
            from_hex(text, params)
