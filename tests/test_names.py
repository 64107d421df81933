import pytest

from bmfont2h.names import screaming_snake


@pytest.mark.parametrize("name, expected", [
    ("Test", "TEST"),
    ("Open Sans", "OPEN_SANS"),
    ("DejaVuSansMono", "DEJA_VU_SANS_MONO"),
    ("HTTPServer", "HTTP_SERVER"),
    ("Noto-Sans CJK.jp", "NOTO_SANS_CJK_JP"),
    ("  arial  bold ", "ARIAL_BOLD"),
    ("already_SNAKE", "ALREADY_SNAKE"),
    ("Font2D", "FONT_2_D"),
    ("Font16", "FONT_16"),
    ("Px437 IBM VGA8", "PX_437_IBM_VGA_8"),
    ("", ""),
])
def test_screaming_snake(name, expected):
    assert screaming_snake(name) == expected
