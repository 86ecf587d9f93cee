import pytest

from core.formatting import format_file_size


@pytest.mark.parametrize("size", [None, 0])
def test_empty_sizes_render_as_zero_bytes(size):
    assert format_file_size(size) == "0 Bytes"


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (1, "1 Bytes"),
        (500, "500 Bytes"),
        (1023, "1023 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1_048_576, "1 MB"),
        (5_452_595, "5.2 MB"),
        (1_073_741_824, "1 GB"),
        (3_221_225_472, "3 GB"),
    ],
)
def test_picks_largest_unit_and_trims_trailing_zeros(size, expected):
    assert format_file_size(size) == expected


def test_rounds_to_two_decimals_half_up():
    # 1234567 / 1024**2 = 1.17737...
    assert format_file_size(1_234_567) == "1.18 MB"


def test_sizes_beyond_gb_stay_in_gb():
    assert format_file_size(2 * 1024**4) == "2048 GB"
