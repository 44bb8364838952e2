"""Tests for text cleaning and the on-disk knowledge-base loader."""

import pytest

from ragbot.config.knowledge_base import KNOWLEDGE_BASE
from ragbot.config.settings import settings
from ragbot.src.core.ingestor import default_knowledge_base, load_knowledge_base
from ragbot.src.utils.text_utils import clean_text, split_paragraphs


class TestCleanText:
    def test_collapses_horizontal_whitespace(self):
        assert clean_text("hola   \t mundo") == "hola mundo"

    def test_strips_zero_width_and_bom(self):
        assert clean_text("\ufeffho\u200bla") == "hola"

    def test_normalises_line_endings_and_blank_runs(self):
        assert clean_text("uno\r\n\r\n\r\n\r\ndos\rtres") == "uno\n\ndos\ntres"

    def test_nfc_normalisation(self):
        assert clean_text("informacio\u0301n") == "informaci\u00f3n"


class TestSplitParagraphs:
    def test_splits_on_blank_lines(self):
        assert split_paragraphs("uno\n\ndos") == ["uno", "dos"]

    def test_joins_wrapped_lines(self):
        assert split_paragraphs("una línea\nque sigue\n\notro") == ["una línea que sigue", "otro"]

    def test_drops_empty_blocks(self):
        assert split_paragraphs("\n\n\n") == []


class TestLoadKnowledgeBase:
    def test_reads_supported_files_in_name_order(self, tmp_path):
        (tmp_path / "b_work.txt").write_text("Trabajo en backend.\n\nUso Python.", encoding="utf-8")
        (tmp_path / "a_bio.md").write_text("Soy desarrolladora.", encoding="utf-8")
        (tmp_path / "notes.json").write_text("{}", encoding="utf-8")
        (tmp_path / "empty.txt").write_text("   \n", encoding="utf-8")

        assert load_knowledge_base(tmp_path) == ["Soy desarrolladora.", "Trabajo en backend.", "Uso Python."]

    def test_empty_directory(self, tmp_path):
        assert load_knowledge_base(tmp_path) == []

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_knowledge_base(tmp_path / "missing")

    def test_default_is_built_in(self, monkeypatch):
        monkeypatch.setattr(settings, "KNOWLEDGE_BASE_DIR", None)
        assert default_knowledge_base() == list(KNOWLEDGE_BASE)

    def test_default_reads_configured_directory(self, monkeypatch, tmp_path):
        (tmp_path / "kb.txt").write_text("Solo esto.", encoding="utf-8")
        monkeypatch.setattr(settings, "KNOWLEDGE_BASE_DIR", tmp_path)

        assert default_knowledge_base() == ["Solo esto."]


def test_built_in_knowledge_base_is_non_empty():
    assert KNOWLEDGE_BASE
    assert all(entry.strip() for entry in KNOWLEDGE_BASE)
