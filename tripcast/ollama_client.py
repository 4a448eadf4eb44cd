"""Thin client for calling an Ollama chat API as the text generation provider."""

import requests

from . import config
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="ollama_client")


class OllamaClient:
    """Minimal client for the Ollama chat API."""
    def __init__(self, settings: config.Settings | None = None):
        """Initialize client configuration from settings."""
        settings = settings or config.settings
        self.url = f"{settings.ollama_base_url.rstrip('/')}/api/chat"
        self.model = settings.ollama_model
        self.options = settings.ollama_options
        self.timeout = 180

    def chat(self, messages) -> str:
        """Send a chat request and return the assistant content."""
        payload = {
            "model": self.model,
            "messages": messages,
            "stream": False,
            "options": self.options,
        }

        logger.debug("Ollama POST payload: %s", payload)
        try:
            r = requests.post(self.url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            logger.exception("Ollama POST failed: %s", exc)
            raise RuntimeError(f"Ollama POST failed: {exc} (model={self.model}, url={self.url})") from exc

        logger.info(
            "Ollama POST took %.2fs, response: %s",
            r.elapsed.total_seconds(),
            r.text[:200],
        )
        if r.status_code != 200:
            raise RuntimeError(
                f"Ollama POST failed with status {r.status_code}: {(r.text or '')[:200]} "
                f"(model={self.model}, url={self.url})"
            )

        try:
            data = r.json()
        except ValueError as exc:
            raise RuntimeError(f"Ollama returned non-JSON response: {r.text[:200]}") from exc
        content = data.get("message", {}).get("content", "")
        # Normalize non-string content to string
        if isinstance(content, (dict, list)):
            content = str(content)
        return content
