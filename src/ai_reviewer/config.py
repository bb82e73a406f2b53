from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ai_reviewer.review.filters import split_patterns


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    github_token: str | None = None
    github_repository: str | None = None
    github_event_path: str | None = None
    github_event_name: str | None = None
    github_app_id: str | None = None
    github_private_key: str | None = None
    github_webhook_secret: str | None = None

    llm_model: str = "gpt-4o"
    openai_api_key: str | None = None
    openai_base_url: str | None = None
    openai_api_version: str | None = None
    temperature: float = 0.2
    max_tokens: int = 700
    top_p: float = 1.0
    frequency_penalty: float = 0.0
    presence_penalty: float = 0.0
    llm_timeout: float = 120.0
    # Модели с поддержкой response_format={"type": "json_object"}, сравнение точное
    json_mode_models: list[str] = Field(default_factory=lambda: ["gpt-4-1106-preview", "gpt-4o"])

    exclude: str = ""
    include: str = ""
    expand_context_ranges: bool = True
    max_workers: int = Field(default=1, ge=1)

    @property
    def exclude_patterns(self) -> list[str]:
        return split_patterns(self.exclude)

    @property
    def include_patterns(self) -> list[str]:
        return split_patterns(self.include)

    @property
    def supports_json_mode(self) -> bool:
        return self.llm_model in self.json_mode_models


def get_settings() -> Settings:
    return Settings()
