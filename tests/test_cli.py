"""Tests for the domdown command line."""

import io
import json
from pathlib import Path

import pytest

from domdown.cli import EXIT_IMAGES_FAILED, EXIT_OK, EXIT_USAGE, build_argparser, main

PNG_URI = "data:image/png;base64,iVBORw0KGgo="


def write(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


class TestConvert:
    def test_stdout(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        src = write(tmp_path / "in.html", "<h1>Title</h1><p>Body</p>")
        assert main([str(src)]) == EXIT_OK
        assert capsys.readouterr().out == "# Title\n\nBody\n"

    def test_stdin(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("<ul><li>a</li></ul>"))
        assert main(["-"]) == EXIT_OK
        assert capsys.readouterr().out == "- a\n"

    def test_output_file_and_images(self, tmp_path: Path) -> None:
        src = write(tmp_path / "in.html", f'<p>Plot</p><img alt="Chart" src="{PNG_URI}">')
        out = tmp_path / "export" / "chat.md"
        assert main([str(src), "-o", str(out)]) == EXIT_OK
        assert out.read_text(encoding="utf-8") == "Plot\n\n![Chart](Chart.png)\n"
        assert (out.parent / "Chart.png").read_bytes() == b"\x89PNG\r\n\x1a\n"

    def test_images_dir(self, tmp_path: Path) -> None:
        src = write(tmp_path / "in.html", f'<img src="{PNG_URI}">')
        images = tmp_path / "img"
        assert main([str(src), "-o", str(tmp_path / "out.md"), "--images-dir", str(images)]) == EXIT_OK
        assert (images / "image_1.png").exists()

    def test_no_extract_images(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        src = write(tmp_path / "in.html", f'<img src="{PNG_URI}">')
        assert main([str(src), "--no-extract-images"]) == EXIT_OK
        assert capsys.readouterr().out == f"![image]({PNG_URI})\n"
        assert not list(tmp_path.glob("*.png"))


class TestOptions:
    def test_dialect_plain(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        src = write(tmp_path / "in.html", '<span class="inline-code">x</span>')
        assert main([str(src), "--dialect", "plain"]) == EXIT_OK
        assert capsys.readouterr().out == "x\n"

    def test_extra_transparent_tag(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        src = write(tmp_path / "in.html", "<ol><x-item><li>a</li></x-item></ol>")
        assert main([str(src), "--transparent", "x-item"]) == EXIT_OK
        assert capsys.readouterr().out == "1. a\n"

    def test_strip_and_chrome(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        src = write(tmp_path / "in.html", '<p>Keep<button>Copy</button><sup class="ref">1</sup></p>')
        assert main([str(src), "--ai-studio-chrome", "--strip", ".ref"]) == EXIT_OK
        assert capsys.readouterr().out == "Keep\n"

    def test_snapshot_input(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        snapshot = {"type": "element", "tag": "h2", "children": [{"type": "text", "text": "T"}]}
        src = write(tmp_path / "tree.json", json.dumps(snapshot))
        assert main([str(src), "--snapshot"]) == EXIT_OK
        assert capsys.readouterr().out == "## T\n"

    def test_defaults(self) -> None:
        args = build_argparser().parse_args(["in.html"])
        assert args.dialect == "ai-studio"
        assert args.extract_images is True
        assert args.transparent == []


class TestExitCodes:
    def test_failed_image(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        src = write(tmp_path / "in.html", '<img src="data:image/png;base64,@@">')
        assert main([str(src), "-o", str(tmp_path / "out.md")]) == EXIT_IMAGES_FAILED
        assert "image_1.png" in capsys.readouterr().err
        assert (tmp_path / "out.md").read_text(encoding="utf-8") == "![image](image_1.png)\n"

    def test_missing_input(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(tmp_path / "missing.html")]) == EXIT_USAGE
        assert "domdown: error:" in capsys.readouterr().err

    def test_bad_snapshot(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        src = write(tmp_path / "tree.json", "{oops")
        assert main([str(src), "--snapshot"]) == EXIT_USAGE
        assert "invalid JSON" in capsys.readouterr().err

    def test_bad_selector(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        src = write(tmp_path / "in.html", "<p>x</p>")
        assert main([str(src), "--strip", "div > p"]) == EXIT_USAGE
        assert "combinators" in capsys.readouterr().err

    def test_unknown_dialect_exits(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["in.html", "--dialect", "nope"])
        assert exc_info.value.code == 2
