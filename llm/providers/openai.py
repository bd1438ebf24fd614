"""OpenAI provider implementation using structured outputs."""

from typing import List, Optional
from pydantic import BaseModel, Field
from openai import OpenAI
from llm.providers.base import LLMProvider, AIClassification
from llm.prompts.loader import PromptManager
from models.category import Category
from logger import get_logger

logger = get_logger()

# Seconds to wait for a classification when no timeout is configured
DEFAULT_TIMEOUT = 10.0


class ExpenseClassification(BaseModel):
    """Structured output for a single expense."""

    category_slug: Optional[str] = None
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str = ""


class OpenAIProvider(LLMProvider):
    """OpenAI implementation using structured outputs for reliable JSON parsing."""

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key.
            model: Model to use (e.g., "gpt-4o-mini"). If None, uses prompt default.
            timeout: Default request timeout in seconds. If None, uses
                     DEFAULT_TIMEOUT; requests are never unbounded.
        """
        self.timeout = timeout if timeout is not None else DEFAULT_TIMEOUT
        # Retries would stretch the caller's time budget
        self.client = OpenAI(api_key=api_key, timeout=self.timeout, max_retries=0)
        self.model = model
        self.prompt_manager = PromptManager()

    def classify(
        self,
        description: str,
        amount: Optional[float],
        categories: List[Category],
        timeout: Optional[float] = None,
    ) -> AIClassification:
        """Classify one expense description with OpenAI structured outputs.

        Raises:
            ValueError: If OpenAI returns no parsed response.
            openai.OpenAIError: If the API call fails or times out.
        """
        rendered_prompt = self.prompt_manager.render_prompt(
            "classification",
            {
                "description": description,
                "amount_context": f"\nAmount: {amount} MXN" if amount else "",
                "categories": self._format_categories(categories),
            },
        )

        model = self.model or rendered_prompt["parameters"].get("model", "gpt-4o-mini")
        temperature = rendered_prompt["parameters"].get("temperature", 0.1)
        max_tokens = rendered_prompt["parameters"].get("max_tokens", 300)

        logger.debug(
            f"Classifying with model: {model}, prompt version: {rendered_prompt['version']}"
        )

        response = self.client.chat.completions.parse(
            model=model,
            messages=[
                {"role": "system", "content": rendered_prompt["system_prompt"]},
                {"role": "user", "content": rendered_prompt["user_prompt"]},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
            response_format=ExpenseClassification,
            timeout=timeout if timeout is not None else self.timeout,
        )

        result = response.choices[0].message.parsed
        if result is None:
            raise ValueError("OpenAI returned null parsed response")

        return AIClassification(
            category_slug=result.category_slug,
            confidence=result.confidence,
            reasoning=result.reasoning,
        )

    def _format_categories(self, categories: List[Category]) -> str:
        """Format categories for the prompt, one slug per line."""
        if not categories:
            return "No categories available."

        return "\n".join(f"- {cat.slug} - {cat.name}" for cat in categories)
