import asyncio
import logging

from providers.base import BaseProvider

logger = logging.getLogger(__name__)


class GeminiProvider(BaseProvider):
    """Provider for Google Gemini API using the official SDK."""

    def __init__(self, api_key: str, default_model: str = "gemini-1.5-flash", timeout: float = 30.0):
        self.api_key = api_key
        self.default_model = default_model
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "gemini"

    async def chat(self, messages: list[dict], model: str | None = None) -> dict:
        used_model = model or self.default_model
        try:
            import google.generativeai as genai
            # genai is configured module-wide, so set the key right before the call
            genai.configure(api_key=self.api_key)

            system_instruction = None
            history = []
            for msg in messages:
                if msg["role"] == "system":
                    system_instruction = msg["content"]
                elif msg["role"] == "user":
                    history.append({"role": "user", "parts": [msg["content"]]})
                elif msg["role"] == "assistant":
                    history.append({"role": "model", "parts": [msg["content"]]})

            # The last user turn is sent as the new message, the rest is history
            last_message = ""
            if history and history[-1]["role"] == "user":
                last_message = history[-1]["parts"][0]
                history = history[:-1]

            g_model = genai.GenerativeModel(
                model_name=used_model,
                system_instruction=system_instruction
            )
            chat_session = g_model.start_chat(history=history)
            response = await asyncio.wait_for(
                chat_session.send_message_async(content=last_message),
                timeout=self.timeout,
            )

            return {
                "text": response.text,
                "provider": self.name,
                "model": used_model,
                "status": "success",
                "error": None,
            }
        except asyncio.TimeoutError:
            logger.warning(f"Gemini request timed out after {self.timeout}s")
            return {
                "text": None,
                "provider": self.name,
                "model": used_model,
                "status": "failed",
                "error": "Timeout",
            }
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            return {
                "text": None,
                "provider": self.name,
                "model": used_model,
                "status": "failed",
                "error": str(e),
            }
