import asyncio
from typing import List, Optional
import google.generativeai as genai
from groq import AsyncGroq
from hintgate.config import Settings
from hintgate.errors import ProviderError
from hintgate.utils.logger import logger


class GroqHintGenerator:
    """Generates text using Groq chat completions (Llama 3.3 70B by default)."""
    name = "groq"

    def __init__(self, api_key: str, model: str = "llama-3.3-70b-versatile", client: Optional[AsyncGroq] = None):
        self.model = model
        self.client = client or AsyncGroq(api_key=api_key)

    async def complete(self, system_prompt: str, user_prompt: str, max_tokens: int, temperature: float) -> str:
        try:
            response = await self.client.chat.completions.create(
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt}
                ],
                model=self.model,
                temperature=temperature,
                max_tokens=max_tokens
            )
        except Exception as e:
            logger.error(f"Groq API Error: {str(e)}")
            raise ProviderError(f"Groq request failed: {str(e)}") from e

        if not response.choices:
            raise ProviderError("Groq returned no choices.")
        return response.choices[0].message.content or ""


class GeminiHintGenerator:
    """Generates text using Gemini. The SDK is synchronous, so calls run in a worker thread."""
    name = "gemini"

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash"):
        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model)

    async def complete(self, system_prompt: str, user_prompt: str, max_tokens: int, temperature: float) -> str:
        try:
            response = await asyncio.to_thread(
                self.model.generate_content,
                f"{system_prompt}\n\n{user_prompt}",
                generation_config={"max_output_tokens": max_tokens, "temperature": temperature}
            )
            return response.text
        except Exception as e:
            logger.error(f"Gemini API Error: {str(e)}")
            raise ProviderError(f"Gemini request failed: {str(e)}") from e


def build_generators(settings: Settings) -> List:
    """Returns the configured providers in the order they should be tried."""
    generators = []
    if settings.GROQ_API_KEY:
        generators.append(GroqHintGenerator(settings.GROQ_API_KEY, settings.GROQ_MODEL))
    if settings.GEMINI_API_KEY:
        generators.append(GeminiHintGenerator(settings.GEMINI_API_KEY, settings.GEMINI_MODEL))
    if not generators:
        logger.warning("No LLM API keys configured. Every request will be served fallback hints.")
    return generators
