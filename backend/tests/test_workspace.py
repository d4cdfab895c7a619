"""Tests for the stored ruleset / compendium workspace."""

import json
from dataclasses import replace

import pytest

from chunker import InvalidChunkSizeError
from exporters import NothingToExportError, UnsupportedFormatError
from storage import COMPENDIUM_FORMAT_KEY, COMPENDIUM_KEY, RULESET_KEY
from workspace import Workspace


@pytest.fixture
def ws(store):
    return Workspace(store)


class TestRuleset:
    def test_empty_by_default(self, ws):
        assert ws.ruleset_text == ""
        assert ws.outline() == ""

    def test_outline_follows_text(self, ws):
        ws.ruleset_text = "Tone:\nBe concise\nBe kind"
        assert ws.outline() == "## Tone\n- Be concise\n  - Be kind"
        ws.ruleset_text = "Scope:"
        assert ws.outline() == "## Scope"

    def test_text_stored_as_json_string(self, ws, store):
        ws.ruleset_text = "Tone:"
        assert json.loads(store.get(RULESET_KEY)) == "Tone:"

    def test_survives_new_workspace(self, ws, store):
        ws.ruleset_text = "Keep me"
        assert Workspace(store).ruleset_text == "Keep me"

    def test_export(self, ws):
        ws.ruleset_text = "Goals:\nShip"
        assert ws.export_outline() == ("instructional-ruleset.md", "## Goals\n- Ship")

    def test_export_empty_refused(self, ws):
        with pytest.raises(NothingToExportError):
            ws.export_outline()


class TestCompendium:
    def test_chunks_follow_text(self, ws, store):
        ws.compendium_text = "A. B. C."
        chunks = ws.chunks()
        assert len(chunks) == 1
        assert chunks[0].content == "A. B. C."
        assert json.loads(store.get(COMPENDIUM_KEY)) == "A. B. C."

    def test_chunk_budget_from_settings(self, ws):
        from settings import settings

        assert ws.max_chunk_chars == settings.KCS_MAX_CHUNK_CHARS

    def test_custom_chunk_budget(self, store):
        ws = Workspace(store, max_chunk_chars=5)
        ws.compendium_text = "One. Two. Three."
        assert [c.content for c in ws.chunks()] == ["One.", "Two.", "Three."]

    def test_chunks_are_fresh_lists(self, ws):
        ws.compendium_text = "One. Two."
        ws.chunks().clear()
        assert len(ws.chunks()) == 1

    def test_format_defaults_to_json(self, ws):
        assert ws.export_format == "json"

    def test_format_persisted(self, ws, store):
        ws.export_format = "jsonl"
        assert json.loads(store.get(COMPENDIUM_FORMAT_KEY)) == "jsonl"
        assert ws.export_format == "jsonl"

    def test_unknown_format_rejected(self, ws):
        with pytest.raises(UnsupportedFormatError):
            ws.export_format = "xml"

    def test_garbage_stored_format_reads_as_json(self, ws, store):
        store.set(COMPENDIUM_FORMAT_KEY, json.dumps("yaml"))
        assert ws.export_format == "json"

    def test_export_uses_stored_format(self, store):
        ws = Workspace(store, max_chunk_chars=10)
        ws.compendium_text = "Alpha one. Beta two. Gamma three."
        ws.export_format = "jsonl"
        filename, body = ws.export_chunks()
        assert filename == "knowledge-compendium.jsonl"
        lines = body.split("\n")
        assert len(lines) == len(ws.chunks()) == 3
        assert [json.loads(ln)["id"] for ln in lines] == ["kcs-1", "kcs-2", "kcs-3"]

    def test_export_format_override(self, ws):
        ws.compendium_text = "Alpha."
        filename, body = ws.export_chunks("json")
        assert filename == "knowledge-compendium.json"
        assert json.loads(body)[0]["content"] == "Alpha."

    def test_export_empty_refused(self, ws):
        with pytest.raises(NothingToExportError):
            ws.export_chunks()


class TestChunkBudgetValidation:
    @pytest.mark.parametrize("bad", [0, -5])
    def test_bad_explicit_budget_rejected(self, store, bad):
        with pytest.raises(InvalidChunkSizeError):
            Workspace(store, max_chunk_chars=bad)

    @pytest.mark.parametrize("bad", [0, -700])
    def test_bad_configured_budget_rejected(self, store, monkeypatch, bad):
        import settings as settings_mod

        monkeypatch.setattr(settings_mod, "settings", replace(settings_mod.settings, KCS_MAX_CHUNK_CHARS=bad))
        with pytest.raises(InvalidChunkSizeError):
            Workspace(store)
