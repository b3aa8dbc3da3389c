"""Structured LLM output with Pydantic validation and retry."""

import json
from dataclasses import dataclass
from typing import Any, Generic, Protocol, Type, TypeVar

from pydantic import BaseModel, ValidationError

from generative_pages.utils.providers.base import LLMResponse
from generative_pages.utils.logging import get_logger


logger = get_logger(__name__)


T = TypeVar("T", bound=BaseModel)


class CompletionClient(Protocol):
    """Anything with an LLMClient-compatible ``complete`` coroutine."""

    async def complete(
        self,
        prompt: str,
        system: str = "",
        model: str = "sonnet",
        max_tokens: int = 4096,
        temperature: float = 0.0,
    ) -> LLMResponse:
        ...


class StructuredOutputError(Exception):
    """Raised when LLM output cannot be validated after retries."""

    def __init__(self, message: str, attempts: list[dict[str, Any]]):
        super().__init__(message)
        self.attempts = attempts  # History of failed attempts


@dataclass
class StructuredResult(Generic[T]):
    """Result from structured LLM call including token usage."""

    data: T
    input_tokens: int = 0
    output_tokens: int = 0
    model: str = ""
    attempts: int = 1


class StructuredLLMCaller:
    """
    Calls LLM expecting structured JSON output with validation and retry.

    Features:
    - Pydantic schema validation
    - Error-feedback retry (tells LLM what went wrong)
    - Token usage tracking across retries
    - Preserves original inputs on retry

    Design Pattern: Retry with Feedback
    """

    def __init__(
        self,
        llm_client: CompletionClient | None = None,
        max_retries: int = 3,
    ):
        """
        Initialize structured LLM caller.

        Args:
            llm_client: LLM client instance (creates default if not provided)
            max_retries: Maximum number of retry attempts
        """
        if llm_client is None:
            from generative_pages.utils.llm import LLMClient

            llm_client = LLMClient()
        self.llm_client = llm_client
        self.max_retries = max_retries

    async def call(
        self,
        prompt: str,
        response_model: Type[T],
        system: str | None = None,
        model: str = "sonnet",
        max_tokens: int = 4096,
        temperature: float = 0.0,
        include_schema: bool = True,
    ) -> T:
        """
        Call LLM and parse response into Pydantic model.

        Raises:
            StructuredOutputError: After max_retries failures
        """
        result = await self.call_with_usage(
            prompt=prompt,
            response_model=response_model,
            system=system,
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            include_schema=include_schema,
        )
        return result.data

    async def call_with_usage(
        self,
        prompt: str,
        response_model: Type[T],
        system: str | None = None,
        model: str = "sonnet",
        max_tokens: int = 4096,
        temperature: float = 0.0,
        include_schema: bool = True,
    ) -> StructuredResult[T]:
        """
        Call LLM and parse response, returning result with token usage.

        Args:
            prompt: User prompt requesting structured output
            response_model: Pydantic model class for validation
            system: System prompt (schema instructions are appended)
            model: LLM model alias
            max_tokens: Maximum output tokens per attempt
            temperature: Sampling temperature
            include_schema: Append the JSON schema of ``response_model``;
                prompts that already spell out their format pass False

        Returns:
            StructuredResult with validated data and usage info

        Raises:
            StructuredOutputError: After max_retries failures
        """
        full_system = system or ""
        if include_schema:
            schema_instruction = self._build_schema_instruction(
                response_model.model_json_schema()
            )
            full_system = f"{full_system}\n\n{schema_instruction}".strip()

        attempts: list[dict[str, Any]] = []
        current_prompt = prompt

        input_tokens = 0
        output_tokens = 0
        final_model = model

        for attempt in range(self.max_retries):
            response = await self.llm_client.complete(
                prompt=current_prompt,
                system=full_system,
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
            )

            input_tokens += response.input_tokens
            output_tokens += response.output_tokens
            final_model = response.model
            raw_output = response.content

            # Try to parse JSON
            try:
                json_str = self._extract_json(raw_output)
                data = json.loads(json_str)
            except json.JSONDecodeError as e:
                error_msg = f"Invalid JSON: {e.msg} at position {e.pos}"
                logger.warning(
                    "JSON parse error on attempt",
                    attempt=attempt + 1,
                    error=error_msg,
                )
                attempts.append(
                    {
                        "attempt": attempt + 1,
                        "raw_output": raw_output[:500],
                        "error_type": "json_parse",
                        "error": error_msg,
                    }
                )
                current_prompt = self._build_retry_prompt(
                    original_prompt=prompt,
                    error_type="JSON Parse Error",
                    error_details=error_msg,
                    raw_output=raw_output,
                )
                continue

            # Try to validate against Pydantic schema
            try:
                result = response_model.model_validate(data)
                logger.debug(
                    "Successfully parsed structured output",
                    model=response_model.__name__,
                    attempts=attempt + 1,
                )
                return StructuredResult(
                    data=result,
                    input_tokens=input_tokens,
                    output_tokens=output_tokens,
                    model=final_model,
                    attempts=attempt + 1,
                )
            except ValidationError as e:
                error_msg = self._format_validation_errors(e)
                logger.warning(
                    "Schema validation error on attempt",
                    attempt=attempt + 1,
                    error=error_msg,
                )
                attempts.append(
                    {
                        "attempt": attempt + 1,
                        "raw_output": raw_output[:500],
                        "parsed_json": data,
                        "error_type": "schema_validation",
                        "error": error_msg,
                    }
                )
                current_prompt = self._build_retry_prompt(
                    original_prompt=prompt,
                    error_type="Schema Validation Error",
                    error_details=error_msg,
                    raw_output=raw_output,
                )
                continue

        logger.error(
            "Failed to get valid structured output after retries",
            max_retries=self.max_retries,
            model=response_model.__name__,
        )
        raise StructuredOutputError(
            f"Failed to get valid structured output after {self.max_retries} attempts",
            attempts=attempts,
        )

    def _build_schema_instruction(self, schema: dict[str, Any]) -> str:
        """Build instruction telling LLM the expected schema."""
        return f"""You MUST respond with valid JSON matching this schema:

```json
{json.dumps(schema, indent=2)}
```

Rules:
1. Output ONLY valid JSON, no explanations before or after
2. All required fields must be present
3. Field types must match the schema exactly
4. Use null for optional fields if not applicable"""

    def _build_retry_prompt(
        self,
        original_prompt: str,
        error_type: str,
        error_details: str,
        raw_output: str,
    ) -> str:
        """Build prompt for retry with error feedback."""
        return f"""{original_prompt}

---
PREVIOUS ATTEMPT FAILED - Please fix and try again.

Error Type: {error_type}
Error Details: {error_details}

Your previous output was:
```
{raw_output[:1000]}
```

Please provide a corrected JSON response that fixes these issues."""

    def _extract_json(self, text: str) -> str:
        """Extract JSON from response, handling markdown code blocks."""
        text = text.strip()

        if "```json" in text:
            start = text.find("```json") + 7
            end = text.find("```", start)
            if end > start:
                return text[start:end].strip()

        if "```" in text:
            start = text.find("```") + 3
            # Skip optional language identifier
            newline = text.find("\n", start)
            if newline != -1 and newline - start < 20:
                start = newline + 1
            end = text.find("```", start)
            if end > start:
                return text[start:end].strip()

        # Find the outermost JSON object/array directly
        for start_char, end_char in [("{", "}"), ("[", "]")]:
            start = text.find(start_char)
            if start == -1:
                continue
            depth = 0
            in_string = False
            escape = False
            for i, char in enumerate(text[start:], start):
                if escape:
                    escape = False
                    continue
                if char == "\\":
                    escape = True
                    continue
                if char == '"':
                    in_string = not in_string
                    continue
                if in_string:
                    continue
                if char == start_char:
                    depth += 1
                elif char == end_char:
                    depth -= 1
                    if depth == 0:
                        return text[start : i + 1]

        return text

    def _format_validation_errors(self, error: ValidationError) -> str:
        """Format Pydantic validation errors for LLM feedback."""
        errors = []
        for e in error.errors():
            loc = " -> ".join(str(x) for x in e["loc"])
            errors.append(f"- Field '{loc}': {e['msg']}")
        return "\n".join(errors)
