"""Structured logging tests."""

import asyncio
import json
import logging

import pytest

from seodesc.api.observability import StructuredFormatter, clear_context, get_logger, set_context


def make_record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("seodesc.test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def reset_context():
    clear_context()
    yield
    clear_context()


class TestStructuredFormatter:
    def test_json_with_context_and_extra(self):
        set_context(batch_id="b1", page="Arsenal tickets")

        line = StructuredFormatter().format(make_record("Page done", word_count=400))
        data = json.loads(line)

        assert data["message"] == "Page done"
        assert data["level"] == "INFO"
        assert data["logger"] == "seodesc.test"
        assert data["batch_id"] == "b1"
        assert data["page"] == "Arsenal tickets"
        assert data["data"] == {"word_count": 400}

    def test_extra_data_merged(self):
        line = StructuredFormatter().format(make_record("x", extra_data={"attempt": 2}))
        assert json.loads(line)["data"] == {"attempt": 2}

    def test_no_context_keys_when_unset(self):
        data = json.loads(StructuredFormatter().format(make_record("plain")))
        assert "batch_id" not in data
        assert "page" not in data
        assert "data" not in data


class TestContextIsolation:
    @pytest.mark.asyncio
    async def test_page_context_is_per_task(self):
        """Sibling page tasks never see each other's page tag."""
        set_context(batch_id="batch")
        seen: dict[str, str] = {}

        async def page_task(name: str) -> None:
            set_context(page=name)
            await asyncio.sleep(0)
            line = StructuredFormatter().format(make_record("tick"))
            seen[name] = json.loads(line)["page"]

        await asyncio.gather(page_task("A"), page_task("B"))

        assert seen == {"A": "A", "B": "B"}


def test_get_logger_cached():
    assert get_logger("seodesc.x") is get_logger("seodesc.x")
