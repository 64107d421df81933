import pytest

PAGE_BYTES = bytes([0xDE, 0xAD, 0xBE, 0xEF])

SAMPLE_FNT = """\
info face="Test" size=16 bold=0 italic=0 charset="" unicode=1 stretchH=100 smooth=1 aa=1 padding=0,0,0,0 spacing=1,1
common lineHeight=20 base=16 scaleW=256 scaleH=256 pages=1 packed=0 alphaChnl=0 redChnl=3 greenChnl=3 blueChnl=3
page id=0 file="page0.png"
chars count=2
char id=65   x=1     y=2     width=8     height=12    xoffset=0     yoffset=4     xadvance=9     page=0  chnl=15
char id=66   x=10    y=2     width=7     height=12    xoffset=-1    yoffset=4     xadvance=8     page=0  chnl=15
kernings count=1
kerning first=65  second=66  amount=-2
"""

HEADER_ONLY_FNT = """\
info face="Empty Font" size=12
common lineHeight=14 base=11 scaleW=128 scaleH=64 packed=0 alphaChnl=1 redChnl=0 greenChnl=0 blueChnl=0
"""


@pytest.fixture
def make_font(tmp_path):
    """Write a descriptor plus page files into tmp_path; returns its path."""
    def _make(text, pages=None, name="font.fnt"):
        for page_name, data in (pages or {}).items():
            (tmp_path / page_name).write_bytes(data)
        path = tmp_path / name
        path.write_text(text)
        return path
    return _make


@pytest.fixture
def sample_font(make_font):
    return make_font(SAMPLE_FNT, {"page0.png": PAGE_BYTES})


def char_lines(*ids):
    return "".join(f"char id={cp} x=0 y=0 width=1 height=1 xoffset=0 "
                   f"yoffset=0 xadvance=1 page=0 chnl=15\n" for cp in ids)


@pytest.fixture
def chars():
    """Build char lines for the given code points."""
    return char_lines


@pytest.fixture
def header_only_text():
    return HEADER_ONLY_FNT
