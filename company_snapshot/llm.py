"""
LLM Client
Wraps Claude for the two kinds of calls the pipeline makes: schema-constrained
extraction (JSON out) and free-form generation (Markdown out).
"""

import json
import logging
import time

import anthropic
from pydantic import BaseModel

from company_snapshot.errors import ExtractionError, GenerationError

logger = logging.getLogger(__name__)

MAX_RETRIES = 3

EXTRACTION_SYSTEM_PROMPT = """You are a precise data extraction assistant. \
You read unstructured input and return a single JSON object that conforms \
exactly to the JSON schema you are given. Use null for anything you cannot \
determine. Return ONLY the JSON object, no markdown formatting or code blocks."""

EXTRACTION_USER_PROMPT = """{prompt}

---

Return a JSON object matching this JSON schema:

{schema_json}"""

REPORT_SYSTEM_PROMPT = """You are a business research analyst who writes \
concise, well-structured company briefings in Markdown. Only state facts that \
are supported by the material you are given."""

_TRANSIENT_ERRORS = (
    anthropic.RateLimitError,
    anthropic.APIConnectionError,
    anthropic.InternalServerError,
)


def _parse_json_object(response_text: str) -> dict:
    """Parse a JSON object from model output, tolerating markdown fences and chatter."""
    response_text = response_text.strip()

    if response_text.startswith("```"):
        lines = response_text.split("\n")
        # Strip opening ```json and closing ``` lines
        if len(lines) > 2:
            response_text = "\n".join(lines[1:-1])
        else:
            response_text = response_text.strip("`").strip()

    try:
        data = json.loads(response_text)
    except json.JSONDecodeError:
        start = response_text.find("{")
        end = response_text.rfind("}") + 1
        if start < 0 or end <= start:
            raise ExtractionError(f"LLM did not return valid JSON: {response_text[:200]}")
        try:
            data = json.loads(response_text[start:end])
        except json.JSONDecodeError as e:
            raise ExtractionError(f"LLM did not return valid JSON: {response_text[:200]}") from e

    if not isinstance(data, dict):
        raise ExtractionError(f"Expected a JSON object, got {type(data).__name__}")
    return data


class ClaudeClient:
    """Anthropic-backed extraction and generation service."""

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-5-20250929",
        timeout: int = 120,
        max_tokens: int = 4000,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.max_tokens = max_tokens

    def _complete(self, system: str, user_prompt: str, max_tokens: int) -> str:
        """Send one message to Claude, retrying transient API errors with backoff."""
        client = anthropic.Anthropic(api_key=self.api_key, timeout=self.timeout)

        message = None
        for attempt in range(1, MAX_RETRIES + 1):
            try:
                message = client.messages.create(
                    model=self.model,
                    max_tokens=max_tokens,
                    system=system,
                    messages=[{"role": "user", "content": user_prompt}],
                )
                break
            except _TRANSIENT_ERRORS as e:
                if attempt == MAX_RETRIES:
                    raise
                wait = 2 ** attempt
                logger.warning(f"Anthropic API error (attempt {attempt}/{MAX_RETRIES}): {e}. Retrying in {wait}s...")
                time.sleep(wait)

        if not message.content:
            return ""
        return message.content[0].text.strip()

    def extract(self, prompt: str, schema: type[BaseModel]) -> dict:
        """
        Ask Claude for a JSON object shaped like `schema`.

        The returned dict is parsed but not validated; callers validate it
        against their own model.

        Raises:
            ExtractionError: If the call fails or the response is not a JSON object.
        """
        schema_json = json.dumps(schema.model_json_schema(by_alias=True), indent=2)
        user_prompt = EXTRACTION_USER_PROMPT.format(prompt=prompt, schema_json=schema_json)

        logger.info(f"Sending extraction request to Claude ({self.model})...")
        try:
            response_text = self._complete(EXTRACTION_SYSTEM_PROMPT, user_prompt, max_tokens=1000)
        except anthropic.APIError as e:
            raise ExtractionError(f"Extraction call failed: {e}") from e

        if not response_text:
            raise ExtractionError("Extraction call returned an empty response")
        return _parse_json_object(response_text)

    def generate(self, prompt: str) -> str:
        """
        Generate free-form text for `prompt`.

        Raises:
            GenerationError: If the call fails or returns no text.
        """
        logger.info(f"Sending generation request to Claude ({self.model})...")
        try:
            response_text = self._complete(REPORT_SYSTEM_PROMPT, prompt, max_tokens=self.max_tokens)
        except anthropic.APIError as e:
            raise GenerationError(f"Generation call failed: {e}") from e

        if not response_text:
            raise GenerationError("Generation call returned an empty response")
        return response_text
