from __future__ import annotations

import json

import pytest

from conftest import FakeLLM, make_hit
from deep_research.agents.url_selector import URLSelector
from deep_research.errors import StructuredOutputError
from deep_research.models.research import SelectedUrl, UrlSelection


@pytest.mark.asyncio
async def test_select_returns_model_order_as_is():
    selection = UrlSelection(
        urls=[
            SelectedUrl(url="https://example.com/3"),
            SelectedUrl(url="https://example.com/1"),
            SelectedUrl(url="https://example.com/3"),
        ]
    )
    llm = FakeLLM(objects={UrlSelection: selection})
    selector = URLSelector(llm, "test/flagship")

    urls = await selector.select([make_hit(1), make_hit(2), make_hit(3)], "find inventors")

    assert urls == ["https://example.com/3", "https://example.com/1", "https://example.com/3"]
    call = llm.object_calls[0]
    assert call["schema"] is UrlSelection
    assert call["model"] == "test/flagship"


@pytest.mark.asyncio
async def test_prompt_contains_objective_and_serialized_hits():
    llm = FakeLLM(objects={UrlSelection: UrlSelection(urls=[])})
    selector = URLSelector(llm, "test/flagship")
    hits = [make_hit(1), make_hit(2)]

    urls = await selector.select(hits, "Who built the first press?")

    assert urls == []
    prompt = llm.object_calls[0]["prompt"]
    assert '"Who built the first press?"' in prompt
    serialized = prompt.split("Here are the search results:\n", 1)[1]
    assert json.loads(serialized) == [
        {"title": "Result 1", "url": "https://example.com/1", "content": "Snippet 1"},
        {"title": "Result 2", "url": "https://example.com/2", "content": "Snippet 2"},
    ]


@pytest.mark.asyncio
async def test_no_hits_skips_the_model():
    llm = FakeLLM(objects={UrlSelection: UrlSelection(urls=[SelectedUrl(url="https://invented.com")])})

    urls = await URLSelector(llm, "test/flagship").select([], "anything")

    assert urls == []
    assert llm.object_calls == []


@pytest.mark.asyncio
async def test_validation_errors_propagate():
    llm = FakeLLM(objects={UrlSelection: StructuredOutputError("bad shape")})

    with pytest.raises(StructuredOutputError):
        await URLSelector(llm, "test/flagship").select([make_hit(1)], "o")
