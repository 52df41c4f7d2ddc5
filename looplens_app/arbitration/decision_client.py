"""Decision service clients."""

from abc import ABC, abstractmethod
from typing import Optional

from openai import AsyncOpenAI

from ..config.defaults import ArbitrationParams

PROMPT_ROLE = "user"


class BaseDecisionClient(ABC):
    """Base class for text-in, text-out decision services."""

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """
        Send a prompt and return the raw reply text.

        Args:
            prompt: Natural-language prompt

        Returns:
            Reply text, possibly empty
        """
        pass

    async def aclose(self) -> None:
        """Release any connection resources."""
        return None


class OpenAIDecisionClient(BaseDecisionClient):
    """Chat completion client for any OpenAI-compatible endpoint (Groq by default)."""

    def __init__(
        self,
        api_key: str,
        params: Optional[ArbitrationParams] = None,
        client: Optional[AsyncOpenAI] = None
    ) -> None:
        self.params = params or ArbitrationParams()
        self.client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=self.params.base_url,
            timeout=self.params.timeout_seconds,
            max_retries=self.params.max_retries,
        )

    async def complete(self, prompt: str) -> str:
        response = await self.client.chat.completions.create(
            model=self.params.model,
            messages=[{"role": PROMPT_ROLE, "content": prompt}],
            temperature=self.params.temperature,
            max_tokens=self.params.max_tokens,
        )

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def aclose(self) -> None:
        await self.client.close()
