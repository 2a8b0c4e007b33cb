"""LLM-backed plain-language explanations of custom mapping functions."""
from __future__ import annotations

from typing import Callable, Optional

import structlog
from litellm import completion

from mapping_explainer.exceptions import InvalidInputError, UpstreamError

logger = structlog.get_logger()

NO_EXPLANATION = "No explanation generated."

SYSTEM_PROMPT = """You explain JavaScript mapping functions that build standardized (RESO) real estate fields from MLS data. Your readers are a non-technical front-end support team.

You will receive:
Field Name: the RESO field the function builds (for example ParkingTotal or ListPrice).
Function: the full JavaScript function body that produces the value for that field.

The function reads one or more MLS fields from incoming MLS data, applies checks, conditions, combinations or lookups, and produces a single result for the field.

Style rules:
- Always begin with: The function for the field [[Field Name]]... using the exact field name you were given. This is the start of your first sentence, not a heading.
- Use very simple, plain language and no programming jargon.
- Say "MLS field" instead of "property" or "object property", "data" instead of variable names such as rowData, record or obj, and "value" instead of type names such as string, number or boolean.
- Call what the function produces "the result".
- Keep it to 2-6 short sentences, or a short numbered list (1., 2., 3.) of one-sentence steps with no title.
- Plain text only: no Markdown headings, no code blocks, no JSON, no section titles such as "Summary" or "Steps".
- Never paste, quote or repeat the original code.

Content rules:
- Follow the order in which the function runs: which MLS fields it looks at first, what it checks, how it combines or prefers values, and what it finally sets as the result.
- Name every MLS field the function reads, exactly as written in the function, in the order they are first used. Where you can, add a short plain description, e.g. "the MLS field LIST_117 (garage spaces)".
- Say clearly how the MLS fields become the result: adding values, falling back from one field to another, reformatting or cleaning, or combining several fields into one.
- If the function can produce no value, say so explicitly, e.g. "If none of these MLS fields have a value, the result for [[Field Name]] will be empty."
- Only describe behavior that is actually in the code. Do not guess or invent anything.

Always follow these instructions exactly."""


class FunctionExplainer:
    """Explain one mapping function body through any LiteLLM-supported model."""

    def __init__(
        self,
        model: str = "gpt-4.1-mini",
        temperature: float = 0.2,
        max_tokens: int = 800,
        api_key: Optional[str] = None,
        completion_fn: Callable = completion,
    ):
        """Initialize explainer.

        Args:
            model: LiteLLM model identifier (e.g. 'gpt-4.1-mini', 'gemini/gemini-1.5-flash')
            temperature: Sampling temperature
            max_tokens: Maximum tokens in response
            api_key: Provider API key (or None to use the provider's env var)
            completion_fn: Completion callable with LiteLLM's signature
        """
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.api_key = api_key
        self._completion = completion_fn

    @staticmethod
    def build_user_message(field_label: str, source_text: str) -> str:
        return f"Field Name: {field_label}\n\nFunction:\n{source_text}\n"

    def explain(self, field_label: str, source_text: str) -> str:
        """Explain what ``source_text`` does to produce ``field_label``.

        Raises:
            InvalidInputError: If the label or the function body is blank
            UpstreamError: If the model call fails
        """
        if not field_label or not field_label.strip():
            raise InvalidInputError("fieldName is required")
        if not source_text or not source_text.strip():
            raise InvalidInputError("mappingFunction is required")

        logger.info("Calling LLM for function explanation", model=self.model, field=field_label)
        try:
            response = self._completion(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": self.build_user_message(field_label, source_text)},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                api_key=self.api_key,
            )
            content = response.choices[0].message.content
        except Exception as e:
            logger.error("Function explanation failed", model=self.model, field=field_label, error=str(e))
            raise UpstreamError(f"Function explanation failed: {e}") from e

        explanation = (content or "").strip()
        if not explanation:
            logger.warning("LLM returned an empty explanation", model=self.model, field=field_label)
            return NO_EXPLANATION
        return explanation
