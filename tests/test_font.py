import pytest

from bmfont2h import BMFont, Bucket, Char, Page
from bmfont2h.font import to_fixed_width


@pytest.mark.parametrize("value, ctype, expected", [
    (255, "uint8_t", 255),
    (256, "uint8_t", 0),
    (-1, "uint8_t", 255),
    (70000, "uint16_t", 70000 - 65536),
    (32767, "int16_t", 32767),
    (32768, "int16_t", -32768),
    (-2, "int16_t", -2),
    (2 ** 32 + 5, "uint32_t", 5),
])
def test_to_fixed_width(value, ctype, expected):
    assert to_fixed_width(value, ctype) == expected


def test_insert_char_appends_only_to_predecessor():
    font = BMFont()
    for cp in (10, 12, 11, 13):
        font.insert_char(Char(id=cp))
    assert [(b.start_char, b.end_char) for b in font.buckets] == [(10, 11), (12, 13)]
    assert font.char_count == 4


def test_bucket_lookup():
    bucket = Bucket(Char(id=40))
    bucket.append(Char(id=41))
    assert 41 in bucket
    assert 42 not in bucket
    assert bucket.follows(42)
    assert bucket.get(41).id == 41
    assert bucket.get(39) is None


def test_find_char():
    font = BMFont()
    font.insert_char(Char(id=1))
    font.insert_char(Char(id=100))
    assert font.find_char(100).id == 100
    assert font.find_char(50) is None


def test_page_drain_releases_handle(tmp_path):
    path = tmp_path / "p.bin"
    path.write_bytes(b"abc" * 5000)
    page = Page.open(str(path))
    assert page.size == 15000
    assert b"".join(page.drain()) == b"abc" * 5000
    assert page.closed
    with pytest.raises(ValueError):
        list(page.drain())


def test_font_close_is_idempotent(tmp_path):
    path = tmp_path / "p.bin"
    path.write_bytes(b"x")
    with BMFont() as font:
        font.pages.append(Page.open(str(path)))
    assert font.pages[0].closed
    font.close()


def test_page_open_missing(tmp_path):
    with pytest.raises(OSError):
        Page.open(str(tmp_path / "missing.png"))
