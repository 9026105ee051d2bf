"""Tests for transcript loading."""

import json

import pytest

from denylog.transcript import TranscriptError, load_transcript


class TestLoadTranscript:
    """Test reading execution files."""

    def test_json_array(self, transcript_file, denied_bash_transcript):
        """Test loading the JSON array format."""
        assert load_transcript(transcript_file) == denied_bash_transcript

    def test_json_lines(self, tmp_path, denied_bash_transcript):
        """Test loading one message per line."""
        path = tmp_path / "session.jsonl"
        path.write_text(
            "\n".join(json.dumps(message) for message in denied_bash_transcript) + "\n\n",
            encoding="utf-8",
        )

        assert load_transcript(str(path)) == denied_bash_transcript

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises TranscriptError."""
        with pytest.raises(TranscriptError, match="Cannot read transcript"):
            load_transcript(tmp_path / "missing.json")

    def test_invalid_json_lines(self, tmp_path):
        """Test that garbage content raises TranscriptError."""
        path = tmp_path / "broken.json"
        path.write_text('{"type": "user"}\nnot json\n', encoding="utf-8")

        with pytest.raises(TranscriptError, match="line 2"):
            load_transcript(path)

    def test_not_a_list(self, tmp_path):
        """Test that a single JSON object is rejected."""
        path = tmp_path / "object.json"
        path.write_text('{"type": "user"}', encoding="utf-8")

        with pytest.raises(TranscriptError, match="list of messages"):
            load_transcript(path)

    def test_empty_array(self, tmp_path):
        """Test that an empty run loads as no messages."""
        path = tmp_path / "empty.json"
        path.write_text("[]", encoding="utf-8")

        assert load_transcript(path) == []
