"""
End-to-end tests for the retro-paint command line.
"""

import numpy as np
import pytest
from PIL import Image

from retro_paint.cli import (
    RunOptions,
    _process_captured,
    main,
    output_path_for,
    paint_buffer,
)
from retro_paint.image_io import load_image_packed
from retro_paint import PixelBuffer


BLACK = 0xFF000000
WHITE = 0xFFFFFFFF
YELLOW = 0xFFFFFF55  # VGA index 14


@pytest.fixture
def framed_png(tmp_path):
    """5x5 PNG: black one-pixel frame around a white 3x3 interior."""
    arr = np.zeros((5, 5, 3), dtype=np.uint8)
    arr[1:4, 1:4] = 255
    path = tmp_path / "frame.png"
    Image.fromarray(arr).save(path)
    return path


class TestMain:
    """Tests for main()."""

    def test_fill_interior_with_default_index(self, framed_png):
        assert main([str(framed_png), "--fill", "2", "2"]) == 0
        out = load_image_packed(framed_png.with_name("frame_retro.png"))
        assert np.all(out[1:4, 1:4] == YELLOW)
        assert out[0, 0] == BLACK
        assert int(np.count_nonzero(out == BLACK)) == 16

    def test_without_fills_only_quantises(self, framed_png):
        assert main([str(framed_png)]) == 0
        out = load_image_packed(framed_png.with_name("frame_retro.png"))
        assert np.all(out[1:4, 1:4] == WHITE)

    def test_outdir_and_index(self, framed_png, tmp_path):
        outdir = tmp_path / "out"
        argv = [str(framed_png), "--outdir", str(outdir), "--fill", "0", "0", "--index", "12"]
        assert main(argv) == 0
        out = load_image_packed(outdir / "frame_retro.png")
        assert out[0, 0] == 0xFFFF5555
        assert out[2, 2] == WHITE

    def test_clear_before_fill(self, framed_png):
        assert main([str(framed_png), "--clear", "4"]) == 0
        out = load_image_packed(framed_png.with_name("frame_retro.png"))
        assert np.all(out == 0xFFAA0003)

    def test_out_of_range_fill_warns(self, framed_png, capsys):
        assert main([str(framed_png), "--fill", "9", "9"]) == 0
        assert "[warn]" in capsys.readouterr().out

    def test_missing_source(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.png")]) == 2
        assert "not found" in capsys.readouterr().err

    def test_bad_palette_file(self, framed_png, tmp_path):
        bad = tmp_path / "bad.act"
        bad.write_bytes(b"\x00" * 10)
        assert main([str(framed_png), "--palette-act", str(bad)]) == 2

    def test_unreadable_image_counts_as_failure(self, tmp_path):
        broken = tmp_path / "broken.png"
        broken.write_bytes(b"not a png")
        assert main([str(broken)]) == 1

    def test_rejects_bad_index(self, framed_png):
        with pytest.raises(SystemExit):
            main([str(framed_png), "--index", "300"])

    def test_folder_mode_parallel(self, tmp_path, capsys):
        for name in ("a.png", "b.png"):
            Image.new("RGB", (3, 2), (255, 255, 255)).save(tmp_path / name)
        Image.new("RGB", (1, 1)).save(tmp_path / "old_retro.png")

        assert main([str(tmp_path), "--jobs", "2", "--fill", "0", "0"]) == 0
        assert load_image_packed(tmp_path / "a_retro.png")[0, 0] == YELLOW
        assert load_image_packed(tmp_path / "b_retro.png")[1, 2] == YELLOW
        assert not (tmp_path / "old_retro_retro.png").exists()

        out = capsys.readouterr().out
        assert out.index("=== a.png ===") < out.index("=== b.png ===")
        assert "Completed 2 file(s), 0 failure(s)." in out

    def test_folder_mode_skips_files_that_are_not_images(self, tmp_path, capsys):
        Image.new("RGB", (2, 2)).save(tmp_path / "real.png")
        (tmp_path / "fake.png").write_bytes(b"not a png")
        (tmp_path / "notes.txt").write_text("hello")

        assert main([str(tmp_path)]) == 0
        assert (tmp_path / "real_retro.png").exists()
        assert not (tmp_path / "fake_retro.png").exists()
        assert "Completed 1 file(s), 0 failure(s)." in capsys.readouterr().out

    def test_debug_output(self, framed_png, capsys):
        assert main([str(framed_png), "--fill", "2", "2", "--debug"]) == 0
        out = capsys.readouterr().out
        assert "[debug]" in out
        assert "Spans" in out


class TestHelpers:
    """Tests for CLI helpers."""

    def test_output_path_for(self, tmp_path):
        src = tmp_path / "pic.jpg"
        assert output_path_for(src, None) == tmp_path / "pic_retro.png"
        assert output_path_for(src, tmp_path / "o") == tmp_path / "o" / "pic_retro.png"

    def test_captured_error_follows_its_banner(self, tmp_path, capsys):
        """Should keep a failed file's error inside its own captured output."""
        broken = tmp_path / "broken.png"
        broken.write_bytes(b"not a png")
        text, ok = _process_captured(broken, RunOptions())
        assert not ok
        assert text.index("=== broken.png ===") < text.index("[error] broken.png")
        assert "[error]" not in capsys.readouterr().err

    def test_paint_buffer_counts_notifications(self):
        buf = PixelBuffer(3, 3)
        options = RunOptions(fills=[(1, 1), (7, 7)], fill_index=5, clear_index=2)
        notifications = paint_buffer(buf, options)
        assert np.all(buf.pixels == 5)
        assert notifications >= 2
