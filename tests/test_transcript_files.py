"""Tests for the saved-transcript file format and bilingual row pairing."""

from __future__ import annotations

import pytest

from src.transcript.files import (
    TranscriptFormatError,
    bilingual_rows,
    parse_transcript_file,
    serialize_segments,
    split_japanese_sentences,
    split_sentences,
    transcript_download,
)
from src.transcript.models import Segment


class TestParseTranscriptFile:
    def test_structured_lines_with_empty_translation(self) -> None:
        loaded = parse_transcript_file("0.0\t1.5\tHello world.\t\n1.5\t3.0\tGoodbye.\t")

        assert loaded.structured
        assert [(s.id, s.start, s.end, s.text, s.ja) for s in loaded.segments] == [
            (0, 0.0, 1.5, "Hello world.", ""),
            (1, 1.5, 3.0, "Goodbye.", ""),
        ]
        assert loaded.transcript == "Hello world. Goodbye."

    def test_translations_are_restored(self) -> None:
        loaded = parse_transcript_file("0\t2\tHi.\tやあ。\n2\t4\tBye.\tじゃあね。\n")
        assert [s.ja for s in loaded.segments] == ["やあ。", "じゃあね。"]

    def test_crlf_and_blank_lines(self) -> None:
        loaded = parse_transcript_file("0\t1\tA.\t\r\n\r\n1\t2\tB.\t\r\n")
        assert [s.text for s in loaded.segments] == ["A.", "B."]
        assert [s.id for s in loaded.segments] == [0, 1]

    def test_leading_byte_order_mark_is_ignored(self) -> None:
        loaded = parse_transcript_file("\ufeff0.0\t1.5\tHello world.\t\n1.5\t3.0\tGoodbye.\t")
        assert loaded.structured
        assert [s.start for s in loaded.segments] == [0.0, 1.5]

    def test_later_lines_may_omit_translation_column(self) -> None:
        loaded = parse_transcript_file("0\t1\tA.\t\n1\t2\tB.")
        assert loaded.segments[1].ja == ""

    def test_three_field_first_line_is_plain_text(self) -> None:
        content = "0\t1\tNot quite structured.\nSecond line."
        loaded = parse_transcript_file(content)
        assert not loaded.structured
        assert loaded.transcript == content

    def test_plain_text(self) -> None:
        loaded = parse_transcript_file("Hello there. How are you?")
        assert loaded.segments == []
        assert loaded.transcript == "Hello there. How are you?"

    def test_empty_file_is_plain(self) -> None:
        assert parse_transcript_file("").segments == []

    def test_bad_timestamp_names_line(self) -> None:
        with pytest.raises(TranscriptFormatError, match="Line 2"):
            parse_transcript_file("0\t1\tA.\t\nabc\t2\tB.\t")

    def test_short_line_names_line(self) -> None:
        with pytest.raises(TranscriptFormatError, match="Line 2"):
            parse_transcript_file("0\t1\tA.\t\n1\t2")


class TestSerialize:
    def test_round_trip(self) -> None:
        segments = [
            Segment(id=0, start=0.0, end=2.34, text="Hello world.", ja="こんにちは世界。"),
            Segment(id=1, start=2.34, end=5.1, text="Untranslated line."),
            Segment(id=2, start=5.1, end=7.0000001, text="Third.", ja="三番目。"),
        ]
        restored = parse_transcript_file(serialize_segments(segments)).segments

        assert len(restored) == len(segments)
        for original, parsed in zip(segments, restored):
            assert parsed.start == pytest.approx(original.start)
            assert parsed.end == pytest.approx(original.end)
            assert (parsed.text, parsed.ja) == (original.text, original.ja)

    def test_no_header_and_no_trailing_newline(self) -> None:
        text = serialize_segments([Segment(id=0, start=0.0, end=1.0, text="A.")])
        assert text == "0.0\t1.0\tA.\t"

    def test_download_falls_back_to_plain_transcript(self) -> None:
        assert transcript_download([], "plain text") == "plain text"
        seg = Segment(id=0, start=0.0, end=1.0, text="A.", ja="あ。")
        assert transcript_download([seg], "ignored") == "0.0\t1.0\tA.\tあ。"


class TestBilingualRows:
    def test_sentence_splitting(self) -> None:
        assert split_sentences("One. Two! Three?") == ["One.", "Two!", "Three?"]
        assert split_japanese_sentences("一。二！三？") == ["一。", "二！", "三？"]
        assert split_sentences("") == []

    def test_plain_transcript_pads_shorter_side(self) -> None:
        rows = bilingual_rows([], "One. Two. Three.", "一。二。")
        assert rows == [("One.", "一。"), ("Two.", "二。"), ("Three.", "")]

    def test_segments_pair_with_their_own_translation(self) -> None:
        segments = [
            Segment(id=0, start=0, end=1, text="A.", ja="あ。"),
            Segment(id=1, start=1, end=2, text="B."),
        ]
        assert bilingual_rows(segments, "ignored", "ignored") == [("A.", "あ。"), ("B.", "")]
