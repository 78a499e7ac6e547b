from abc import ABC, abstractmethod


class BaseProvider(ABC):
    """
    A generative-AI backend for the reading assistant.

    Providers never raise on upstream trouble; they report it in the result
    dict so callers decide how to surface it.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    async def chat(self, messages: list[dict], model: str | None = None) -> dict:
        """
        Send a list of {'role', 'content'} messages (system/user/assistant).

        Returns a dict with:
            - text: str | None : the generated reply
            - provider: str    : provider name
            - model: str       : model used
            - status: "success" | "failed"
            - error: str | None: error message on failure
        """
        ...

    async def ask(self, system: str, prompt: str) -> dict:
        """Single-turn helper: one system instruction plus one user prompt."""
        return await self.chat([
            {"role": "system", "content": system},
            {"role": "user", "content": prompt},
        ])
