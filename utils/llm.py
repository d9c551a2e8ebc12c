import json
import httpx
from typing import Any, Dict, List, Optional

from utils.retry import retry_fetch


class ChatCompletionClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com",
        model: str = "gpt-4o-mini",
        timeout: float = 30.0,
        max_attempts: int = 2,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize an OpenAI-compatible chat completion client.

        Args:
            api_key: Provider API key
            base_url: Base URL for API (default: https://api.openai.com)
            model: Model name (default: gpt-4o-mini)
            timeout: Read timeout in seconds
            max_attempts: Attempts per request, passed to retry_fetch()
            client: Shared AsyncClient. If None, one is opened per request.
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.client = client

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

    def _timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=10.0,
            read=self.timeout,
            write=10.0,
            pool=10.0
        )

    async def chat(self, messages: List[Dict[str, str]], **kwargs: Any) -> str:
        """
        Non-streaming chat completion. Returns the content of the first choice.

        Extra keyword arguments (temperature, max_tokens, response_format, ...)
        are merged into the request payload.
        """
        payload = {
            "model": self.model,
            "messages": messages
        }
        if kwargs:
            payload.update(kwargs)

        url = f"{self.base_url}/v1/chat/completions"

        if self.client is not None:
            resp = await retry_fetch(
                self.client, "POST", url,
                max_attempts=self.max_attempts,
                headers=self._headers(), json=payload, timeout=self._timeout()
            )
        else:
            async with httpx.AsyncClient(timeout=self._timeout()) as client:
                resp = await retry_fetch(
                    client, "POST", url,
                    max_attempts=self.max_attempts,
                    headers=self._headers(), json=payload
                )

        data = resp.json()
        message = data["choices"][0]["message"]
        return message.get("content") or ""

    async def chat_json(self, messages: List[Dict[str, str]], **kwargs: Any) -> Dict[str, Any]:
        """
        Chat completion constrained to a JSON object.

        Raises:
            ValueError: If the model output is not a JSON object
        """
        content = await self.chat(messages, response_format={"type": "json_object"}, **kwargs)
        result = json.loads(content)
        if not isinstance(result, dict):
            raise ValueError("Model output is not a JSON object")
        return result
