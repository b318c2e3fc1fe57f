from __future__ import annotations

import os
from unittest.mock import patch

from deep_research.config import ModelTiers, Settings


def test_defaults_match_pipeline_constants():
    with patch.dict(os.environ, {}, clear=True):
        cfg = Settings(_env_file=None)

    assert cfg.search_max_pages == 5
    assert cfg.summary_chunk_size == 10000
    assert cfg.min_content_length == 100
    assert cfg.task_failure_policy == "abort"
    assert cfg.deduplicate_urls is False
    assert cfg.max_parallel_tasks == 0
    assert cfg.model_tiers == ModelTiers(fast="google/gemini-2.0-flash-001", flagship="openai/gpt-4o")


def test_environment_overrides():
    env = {"FLAGSHIP_MODEL": "openai/gpt-4.1", "SEARCH_MAX_PAGES": "2", "DEDUPLICATE_URLS": "true"}
    with patch.dict(os.environ, env, clear=True):
        cfg = Settings(_env_file=None)

    assert cfg.model_tiers.flagship == "openai/gpt-4.1"
    assert cfg.search_max_pages == 2
    assert cfg.deduplicate_urls is True
