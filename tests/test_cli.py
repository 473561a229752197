"""Tests for the command-line interface.

HOW: main() is called with an explicit argv and always ends in SystemExit;
tests assert on the exit code, the files written to tmp_path, and the
status output on stderr.
"""

from __future__ import annotations

import io
import json

import pytest

from rsvp_reader.cli import _resolve_output_path, build_parser, main


def _run(argv):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


@pytest.fixture
def article(tmp_path):
    path = tmp_path / "article.txt"
    path.write_text("Speed reading is fun. It takes **practice** though.\n\nNew paragraph.", encoding="utf-8")
    return path


class TestParser:

    def test_defaults(self):
        args = build_parser().parse_args(["input.txt"])
        assert args.input_file == "input.txt"
        assert args.wpm is None
        assert args.pause_after_comma is None
        assert not args.stream
        assert not args.play

    def test_pause_toggles(self):
        args = build_parser().parse_args(["in.txt", "--no-pause-after-period", "--pause-after-comma"])
        assert args.pause_after_period is False
        assert args.pause_after_comma is True


class TestExport:

    def test_writes_all_formats_next_to_input(self, article, tmp_path, capsys):
        assert _run([str(article)]) == 0
        assert (tmp_path / "article-timeline.json").is_file()
        assert (tmp_path / "article-cues.txt").is_file()
        assert "Done!" in capsys.readouterr().err

    def test_selected_format_and_preferences(self, article, tmp_path):
        assert _run([str(article), "--formats", "json_timeline", "--wpm", "600", "--chunk-size", "1"]) == 0
        document = json.loads((tmp_path / "article-timeline.json").read_text(encoding="utf-8"))
        texts = [c["text"] for c in document["chunks"]]
        assert texts[:4] == ["Speed", "reading", "is", "fun."]
        assert "practice" in texts
        assert not (tmp_path / "article-cues.txt").exists()

    def test_streamed_output_matches_direct(self, article, tmp_path):
        direct_dir = tmp_path / "direct"
        streamed_dir = tmp_path / "streamed"
        direct_dir.mkdir()
        streamed_dir.mkdir()
        assert _run([str(article), "--formats", "json_timeline", "--output-dir", str(direct_dir)]) == 0
        assert _run([
            str(article), "--formats", "json_timeline", "--output-dir", str(streamed_dir),
            "--stream", "--fragment-chars", "100",
        ]) == 0
        direct = (direct_dir / "article-timeline.json").read_text(encoding="utf-8")
        streamed = (streamed_dir / "article-timeline.json").read_text(encoding="utf-8")
        assert json.loads(direct) == json.loads(streamed)

    def test_conflicting_names_get_counter(self, article, tmp_path):
        _run([str(article), "--formats", "plain_text"])
        _run([str(article), "--formats", "plain_text"])
        assert (tmp_path / "article-cues-2.txt").is_file()

    def test_preferences_file(self, article, tmp_path):
        prefs = tmp_path / "prefs.json"
        prefs.write_text(json.dumps({"wordsPerMinute": 200, "chunkSize": 1}), encoding="utf-8")
        assert _run([str(article), "--formats", "json_timeline", "--preferences", str(prefs)]) == 0
        document = json.loads((tmp_path / "article-timeline.json").read_text(encoding="utf-8"))
        assert all(c["wordsInChunk"] == 1 for c in document["chunks"])

    def test_stdin_input(self, tmp_path, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("From standard input."))
        assert _run(["-", "--formats", "plain_text", "--output-dir", str(tmp_path)]) == 0
        assert (tmp_path / "stdin-cues.txt").is_file()


class TestPlay:

    def test_play_prints_chunks_in_order(self, tmp_path, capsys):
        path = tmp_path / "short.txt"
        path.write_text("one two three", encoding="utf-8")
        assert _run([str(path), "--play", "--wpm", "2000", "--chunk-size", "1"]) == 0
        out = capsys.readouterr().out
        assert out.splitlines() == ["one", "two", "three"]
        assert not list(tmp_path.glob("short-*"))


class TestErrors:

    def test_missing_file(self, tmp_path, capsys):
        assert _run([str(tmp_path / "missing.txt")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_unknown_format(self, article, capsys):
        assert _run([str(article), "--formats", "srt"]) == 1
        assert "Unknown format 'srt'" in capsys.readouterr().err

    def test_invalid_preferences(self, article, capsys):
        assert _run([str(article), "--wpm", "5"]) == 1
        assert "Invalid reader preferences" in capsys.readouterr().err

    def test_missing_output_dir(self, article, tmp_path, capsys):
        assert _run([str(article), "--output-dir", str(tmp_path / "nope")]) == 1
        assert "Output directory does not exist" in capsys.readouterr().err

    def test_bad_fragment_size(self, article):
        assert _run([str(article), "--stream", "--fragment-chars", "0"]) == 2


class TestOutputPath:

    def test_free_name_used_as_is(self, tmp_path):
        assert _resolve_output_path("a", "-cues.txt", tmp_path) == tmp_path / "a-cues.txt"

    def test_counter_inserted_before_extension(self, tmp_path):
        (tmp_path / "a-cues.txt").write_text("", encoding="utf-8")
        (tmp_path / "a-cues-2.txt").write_text("", encoding="utf-8")
        assert _resolve_output_path("a", "-cues.txt", tmp_path) == tmp_path / "a-cues-3.txt"
