from pathlib import Path

import pytest

from bmfont2h import Page, cli
from bmfont2h.cli import main, resolve_output


def test_output_directory(sample_font, tmp_path):
    out_dir = tmp_path / "include"
    out_dir.mkdir()
    assert main([str(sample_font), str(out_dir)]) == 0
    header = (out_dir / "test.h").read_text()
    assert "const struct BMFont BMFONT_TEST = {" in header


def test_output_file(sample_font, tmp_path):
    out = tmp_path / "gen" / "font_data.h"
    assert main([str(sample_font), str(out), "--quiet"]) == 0
    assert out.read_text().startswith("#ifndef _TEST_H_")


def test_default_output_in_cwd(sample_font, tmp_path, monkeypatch):
    cwd = tmp_path / "work"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    assert main([str(sample_font), "-v"]) == 0
    assert (cwd / "test.h").exists()


def test_resolve_output_falls_back_to_input_stem(tmp_path):
    out = resolve_output(tmp_path, "", Path("/fonts/tiny.fnt"))
    assert out == tmp_path.resolve() / "tiny.h"


def test_missing_input(tmp_path, capsys):
    assert main([str(tmp_path / "missing.fnt"), str(tmp_path)]) == 1
    assert "Error:" in capsys.readouterr().err


def test_missing_page(make_font, tmp_path, capsys):
    path = make_font('info face="X" size=8\npage id=0 file="gone.png"\n')
    assert main([str(path), str(tmp_path)]) == 1
    assert "gone.png" in capsys.readouterr().err
    assert not (tmp_path / "x.h").exists()


def test_partial_output_removed_on_page_read_error(sample_font, tmp_path, monkeypatch, capsys):
    def broken_drain(self):
        raise OSError("read failed")

    monkeypatch.setattr(Page, "drain", broken_drain)
    out = tmp_path / "out.h"
    assert main([str(sample_font), str(out)]) == 1
    assert not out.exists()
    assert "read failed" in capsys.readouterr().err


def test_usage_error(capsys):
    with pytest.raises(SystemExit):
        main([])


def test_existing_output_kept_when_it_cannot_be_opened(sample_font, tmp_path, monkeypatch, capsys):
    out = tmp_path / "keep.h"
    out.write_text("precious")

    def locked_open(file, *args, **kwargs):
        if Path(file).resolve() == out.resolve():
            raise PermissionError(13, "Permission denied", str(file))
        return open(file, *args, **kwargs)

    monkeypatch.setattr(cli, "open", locked_open, raising=False)
    assert main([str(sample_font), str(out)]) == 1
    assert out.read_text() == "precious"
    assert "Permission denied" in capsys.readouterr().err
