import json

import litellm
from rich.console import Console
from rich.markup import escape

from ai_reviewer.config import Settings
from ai_reviewer.llm.schemas import ReviewPayload

console = Console()


def extract_json(raw_text: str) -> dict | None:
    """Достать JSON-объект из ответа модели, в том числе из markdown-блока."""
    raw_text = raw_text.strip() or "{}"
    try:
        if raw_text.startswith("```"):
            raw_text = raw_text.split("\n", 1)[1].rsplit("```", 1)[0].strip()
        json_start = raw_text.find("{")
        json_end = raw_text.rfind("}") + 1
        if json_start >= 0 and json_end > json_start:
            raw_text = raw_text[json_start:json_end]
        data = json.loads(raw_text)
    except (json.JSONDecodeError, IndexError):
        return None
    return data if isinstance(data, dict) else None


class LLMClient:
    def __init__(self, settings: Settings):
        self.settings = settings
        self.model = settings.llm_model

    def _query_config(self) -> dict:
        config = {
            "model": self.model,
            "temperature": self.settings.temperature,
            "max_tokens": self.settings.max_tokens,
            "top_p": self.settings.top_p,
            "frequency_penalty": self.settings.frequency_penalty,
            "presence_penalty": self.settings.presence_penalty,
            "timeout": self.settings.llm_timeout,
        }
        if self.settings.openai_api_key:
            config["api_key"] = self.settings.openai_api_key
        if self.settings.openai_base_url:
            config["api_base"] = self.settings.openai_base_url
        if self.settings.openai_api_version:
            config["api_version"] = self.settings.openai_api_version
        if self.settings.supports_json_mode:
            config["response_format"] = {"type": "json_object"}
        return config

    def complete(self, prompt: str) -> str:
        response = litellm.completion(
            messages=[{"role": "system", "content": prompt}],
            **self._query_config(),
        )
        return (response.choices[0].message.content or "").strip()

    def get_review(self, prompt: str) -> ReviewPayload | None:
        """Запросить ревью у модели. При любой ошибке возвращает None."""
        try:
            text = self.complete(prompt)
        except Exception as e:
            console.print(f"[red]Не удалось получить ответ модели: {escape(str(e))}[/red]")
            return None

        data = extract_json(text)
        if data is None:
            console.print(f"[yellow]Ответ модели не является JSON: {escape(text[:200])}[/yellow]")
            return None

        try:
            return ReviewPayload.model_validate(data)
        except ValueError as e:
            console.print(f"[yellow]Ответ модели не соответствует схеме: {escape(str(e))}[/yellow]")
            return None
