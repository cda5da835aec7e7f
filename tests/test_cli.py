"""Tests for CLI commands."""

from contextlib import contextmanager
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import func, select
from typer import Exit

from wortschatz.cli.commands.alternatives import _clear, _generate, _show, _summary
from wortschatz.cli.commands.entries import _add_entry, _delete_entry, _list_entries
from wortschatz.cli.commands.review import _complete, _review
from wortschatz.cli.commands.status import _status
from wortschatz.models import Alternative, Entry
from wortschatz.services.completion import EntryFields


@contextmanager
def patched_session(module: str, session):
    """Point a command module's async_session at the test session."""
    with patch(f"wortschatz.cli.commands.{module}.async_session") as mock_session_ctx:
        mock_session_ctx.return_value.__aenter__ = AsyncMock(return_value=session)
        mock_session_ctx.return_value.__aexit__ = AsyncMock(return_value=None)
        yield mock_session_ctx


class TestEntryCommands:
    """Tests for the entries subcommands."""

    @pytest.mark.asyncio
    async def test_add_entry(self, async_session):
        with patched_session("entries", async_session):
            await _add_entry("Tisch", "Möbelstück", "", "Tafel", "noun", "der")

        entry = (await async_session.execute(select(Entry))).scalar_one()
        assert entry.term == "Tisch"
        assert entry.synonyms == "Tafel"
        assert entry.article == "der"

    @pytest.mark.asyncio
    async def test_add_noun_without_article(self, async_session):
        with patched_session("entries", async_session):
            with pytest.raises(Exit) as exc_info:
                await _add_entry("Tisch", "Möbelstück", "", "", "noun", "")

        assert exc_info.value.exit_code == 1

    @pytest.mark.asyncio
    async def test_add_duplicate(self, async_session):
        with patched_session("entries", async_session):
            await _add_entry("laufen", "rennen", "", "", "verb", "")
            with pytest.raises(Exit) as exc_info:
                await _add_entry("laufen", "gehen", "", "", "verb", "")

        assert exc_info.value.exit_code == 1

    @pytest.mark.asyncio
    async def test_list_entries(self, async_session, capsys):
        with patched_session("entries", async_session):
            await _add_entry("Tisch", "Möbelstück", "", "", "noun", "der")
            await _list_entries("")

        assert "der Tisch" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_list_empty(self, async_session, capsys):
        with patched_session("entries", async_session):
            await _list_entries("")

        assert "No entries found" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_delete_entry(self, async_session):
        with patched_session("entries", async_session):
            await _add_entry("laufen", "rennen", "", "", "verb", "")
            entry = (await async_session.execute(select(Entry))).scalar_one()
            await _delete_entry(entry.id)

        count = await async_session.execute(select(func.count(Entry.id)))
        assert count.scalar() == 0

    @pytest.mark.asyncio
    async def test_delete_missing(self, async_session):
        with patched_session("entries", async_session):
            with pytest.raises(Exit) as exc_info:
                await _delete_entry(999)

        assert exc_info.value.exit_code == 1


class TestReviewCommands:
    """Tests for review and complete."""

    @pytest.mark.asyncio
    async def test_review_not_configured(self):
        with pytest.raises(Exit) as exc_info:
            await _review("tisch", "", "")
        assert exc_info.value.exit_code == 1

    @pytest.mark.asyncio
    async def test_review_prints_correction(self, oracle, capsys):
        oracle.reply({"term": {"partOfSpeech": ["noun"], "article": "der"}})

        await _review("tisch", "", "")

        out = capsys.readouterr().out
        assert "Tisch" in out
        assert "capitalization (noun)" in out

    @pytest.mark.asyncio
    async def test_complete(self, oracle, capsys):
        oracle.reply({"definition": "sich zu Fuß fortbewegen", "partOfSpeech": ["verb"]})

        await _complete(EntryFields(term="laufen"), "term")

        assert "sich zu Fuß fortbewegen" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_complete_upstream_failure(self, oracle):
        oracle.reply("not json")
        with pytest.raises(Exit) as exc_info:
            await _complete(EntryFields(term="laufen"), "term")
        assert exc_info.value.exit_code == 1

    @pytest.mark.asyncio
    async def test_complete_nothing_given(self, oracle):
        with pytest.raises(Exit):
            await _complete(EntryFields(), None)
        assert oracle.call_count == 0


class TestAlternativesCommands:
    """Tests for the alternatives subcommands."""

    @pytest.mark.asyncio
    async def test_generate_and_show(self, async_session, oracle, alternatives_reply, capsys):
        oracle.reply(alternatives_reply)

        with patched_session("alternatives", async_session):
            await _generate("Feierabendbier")
            await _show("Feierabendbier")

        out = capsys.readouterr().out
        assert "Endlich Hopfenkaltschale, Alter" in out
        assert "Behördlich leer" in out

    @pytest.mark.asyncio
    async def test_generate_failure(self, async_session, oracle):
        oracle.reply({"results": {}})

        with patched_session("alternatives", async_session):
            with pytest.raises(Exit) as exc_info:
                await _generate("Feierabendbier")

        assert exc_info.value.exit_code == 1

    @pytest.mark.asyncio
    async def test_show_nothing_stored(self, async_session, capsys):
        with patched_session("alternatives", async_session):
            await _show("Bier")

        assert "No alternatives stored" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_clear_and_summary(self, async_session, capsys):
        async_session.add_all(
            [
                Alternative(item="Bier", situation="arbeit", alternative_text="a"),
                Alternative(item="Wein", situation="arbeit", alternative_text="b"),
            ]
        )
        await async_session.commit()

        with patched_session("alternatives", async_session):
            await _clear("Bier")
            await _summary()

        out = capsys.readouterr().out
        assert "Cleared alternatives for 'Bier'" in out
        assert "Wein" in out
        count = await async_session.execute(select(func.count(Alternative.id)))
        assert count.scalar() == 1


class TestStatusCommand:
    @pytest.mark.asyncio
    async def test_status(self, async_session, capsys):
        with patched_session("status", async_session):
            await _status()

        out = capsys.readouterr().out
        assert "Entries" in out
        assert "OPENAI_API_KEY not set" in out
