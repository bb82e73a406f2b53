import time

import httpx
import jwt

from ai_reviewer.github.client import GITHUB_API_URL

JWT_TTL_SECONDS = 600
# GitHub не принимает iat из будущего, сдвигаем на случай рассинхрона часов
CLOCK_SKEW_SECONDS = 60


class GitHubAppAuth:
    """Токены установки GitHub App для вебхук-режима."""

    def __init__(self, app_id: str, private_key: str, api_url: str = GITHUB_API_URL):
        self.app_id = app_id
        # В переменных окружения ключ часто хранится с экранированными переводами строк
        self.private_key = private_key.replace("\\n", "\n")
        self.api_url = api_url.rstrip("/")

    @property
    def configured(self) -> bool:
        return bool(self.app_id and self.private_key)

    def get_jwt(self, now: int | None = None) -> str:
        now = int(time.time()) if now is None else now
        payload = {
            "iat": now - CLOCK_SKEW_SECONDS,
            "exp": now + JWT_TTL_SECONDS,
            "iss": self.app_id,
        }
        return jwt.encode(payload, self.private_key, algorithm="RS256")

    def get_installation_token(self, installation_id: int) -> str:
        resp = httpx.post(
            f"{self.api_url}/app/installations/{installation_id}/access_tokens",
            headers={
                "Authorization": f"Bearer {self.get_jwt()}",
                "Accept": "application/vnd.github+json",
            },
            timeout=30,
        )
        resp.raise_for_status()
        return resp.json()["token"]
