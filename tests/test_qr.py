import pytest
from conftest import pad, qr_rows

from mfaqr.errors import InvalidQRCode
from mfaqr.qr import QRGeometry, find_geometry, trim_qr


@pytest.mark.parametrize("scale", [1, 2, 3, 5])
def test_trims_to_module_grid(scale, qr_expected):
    raster = pad(qr_rows(scale=scale, border=4), left=7, top=11, right=3, bottom=9)
    assert trim_qr(raster) == qr_expected


def test_wide_border_is_cut_to_four_modules(qr_expected):
    assert trim_qr(qr_rows(scale=3, border=10)) == qr_expected


def test_idempotent(qr_expected):
    assert trim_qr(qr_expected) == qr_expected
    assert trim_qr(trim_qr(qr_expected)) == qr_expected


def test_output_is_square_with_quiet_zone():
    out = trim_qr(qr_rows(scale=2, border=5))
    assert len(out) == len(out[0])
    for row in out[:4] + out[-4:]:
        assert row.strip() == ""
    assert all(row[:4] == "    " and row[-4:] == "    " for row in out)


def test_find_geometry():
    # 4 px margin per module at scale 2: l1 = 9, finder = 14, rest = 10.
    row = " " * 9 + "#" * 14 + " " * 4 + "#" * 6 + " " * 9
    assert find_geometry(row) == QRGeometry(module_scale=2, trim_offset=1, region_length=40)
    assert find_geometry(row).modules == 20


def test_blank_image():
    with pytest.raises(InvalidQRCode, match="No foreground"):
        trim_qr(["     "] * 5)


def test_empty_image():
    with pytest.raises(InvalidQRCode):
        trim_qr([])


def test_finder_too_narrow():
    with pytest.raises(InvalidQRCode, match="narrower than 7") as exc:
        find_geometry("    " * 3 + "######" + " " * 20)
    assert exc.value.row is not None


def test_no_quiet_zone():
    with pytest.raises(InvalidQRCode, match="quiet zone"):
        trim_qr(qr_rows(scale=2, border=2))


def test_row_full_of_foreground():
    with pytest.raises(InvalidQRCode):
        find_geometry("#" * 30)


def test_region_past_row_end():
    with pytest.raises(InvalidQRCode, match="past the row end"):
        find_geometry(" " * 4 + "#" * 7 + " " + "#" + " ")


def test_region_not_multiple_of_scale():
    with pytest.raises(InvalidQRCode, match="multiple"):
        find_geometry(" " * 8 + "#" * 14 + " " + "##" + " " * 20)


def test_unknown_symbols():
    with pytest.raises(InvalidQRCode, match="Finder pattern"):
        find_geometry("  ..##  ")


def test_image_cut_short(qr_expected):
    with pytest.raises(InvalidQRCode, match="module rows"):
        trim_qr(qr_expected[:-8])


def test_ragged_rows(qr_expected):
    rows = list(qr_expected)
    rows[10] = rows[10][:-1]
    with pytest.raises(InvalidQRCode, match="Row length"):
        trim_qr(rows)


def test_corrupted_first_row(qr_expected):
    rows = list(qr_expected)
    rows[4] = "#" * len(rows[4])
    with pytest.raises(InvalidQRCode):
        trim_qr(rows)
