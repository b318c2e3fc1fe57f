from dataclasses import dataclass

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # OpenRouter
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    fast_model: str = "google/gemini-2.0-flash-001"  # bulk summarization and direct Q&A
    flagship_model: str = "openai/gpt-4o"  # planning, URL selection, final report
    llm_timeout_seconds: float = 180.0

    # Search provider (SearxNG-compatible JSON endpoint)
    search_base_url: str = "https://search.maia.id/search"
    search_max_pages: int = 5
    search_timeout_seconds: float = 30.0

    # Content fetcher
    fetcher_backend: str = "urlparser"  # urlparser | direct
    fetcher_base_url: str = "https://urlparser.maia.id/"
    fetch_timeout_seconds: float = 30.0
    min_content_length: int = 100

    # Summarization
    summary_chunk_size: int = 10000

    # Fan-out limits, 0 means unbounded
    max_parallel_tasks: int = 0
    max_parallel_fetches: int = 0
    max_parallel_summaries: int = 0

    # Pipeline policy
    task_failure_policy: str = "abort"  # abort | continue
    deduplicate_urls: bool = False

    # App
    report_path: str = "report.md"
    app_log_level: str = "INFO"
    noisy_log_level: str = "WARNING"
    log_dir: str = "logs"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def model_tiers(self) -> "ModelTiers":
        return ModelTiers(fast=self.fast_model, flagship=self.flagship_model)


@dataclass(frozen=True)
class ModelTiers:
    """The two text-generation tiers used by the pipeline."""

    fast: str
    flagship: str


settings = Settings()
