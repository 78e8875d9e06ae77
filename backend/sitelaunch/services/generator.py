# backend/sitelaunch/services/generator.py
from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict

from openai import OpenAI
from pydantic import ValidationError

from ..core.config import get_settings
from ..schemas.deployments import SiteArtifact
from .errors import GenerationFailure
from .llm import get_llm_client, limit_llm_concurrency

logger = logging.getLogger(__name__)

_JSON_BLOCK_RE = re.compile(r"\{[\s\S]*\}")

DEFAULT_METADATA = {
    "title": "Generated Website",
    "description": "AI-generated website",
    "keywords": [],
}


def build_prompt(brief: Dict[str, Any]) -> str:
    colors = json.dumps(brief.get("colors") or {})
    products = json.dumps(brief.get("products") or [])
    return f"""Generate a complete, production-ready website based on the following brief:

Name: {brief.get("name")}
Email: {brief.get("email")}
Industry: {brief.get("industry")}
Page Type: {brief.get("page_type")}
Description: {brief.get("description")}
Color Preferences: {colors}
Products/Services: {products}

Please generate:
1. Complete HTML with semantic structure
2. CSS with modern, responsive design
3. JavaScript for interactivity (if needed)

Requirements:
- Mobile-first responsive design
- Modern, professional appearance
- SEO-optimized structure
- Accessible (WCAG 2.1 Level AA)
- Fast loading time
- Cross-browser compatible

Return the response in the following JSON format:
{{
  "html": "complete HTML code",
  "css": "complete CSS code",
  "js": "JavaScript code (if any)",
  "metadata": {{
    "title": "page title",
    "description": "meta description",
    "keywords": ["keyword1", "keyword2"]
  }}
}}"""


def parse_generation(content: str) -> SiteArtifact:
    """
    Pull the first {...} block out of the model reply. Replies without a
    JSON object are treated as raw HTML.
    """
    match = _JSON_BLOCK_RE.search(content or "")
    if match:
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise GenerationFailure(f"Failed to parse generated website: {e}") from e
        if not isinstance(data, dict):
            raise GenerationFailure("Failed to parse generated website: not an object")
        try:
            return SiteArtifact.model_validate(data)
        except ValidationError as e:
            raise GenerationFailure(f"Failed to parse generated website: {e}") from e

    return SiteArtifact(html=content or "", metadata=dict(DEFAULT_METADATA))


class ContentGenerator:
    """
    Brief -> SiteArtifact via a single chat completion.

    Any transport, auth or parse problem is raised as GenerationFailure.
    """

    def __init__(
        self,
        client_factory: Callable[[], OpenAI] = get_llm_client,
        model: str | None = None,
        max_tokens: int | None = None,
    ) -> None:
        settings = get_settings()
        self._client_factory = client_factory
        self.model = model or settings.LLM_MODEL
        self.max_tokens = max_tokens or settings.LLM_MAX_TOKENS

    def generate(self, brief: Dict[str, Any]) -> SiteArtifact:
        try:
            client = self._client_factory()
            with limit_llm_concurrency():
                resp = client.chat.completions.create(
                    model=self.model,
                    max_tokens=self.max_tokens,
                    messages=[{"role": "user", "content": build_prompt(brief)}],
                )
            content = resp.choices[0].message.content or ""
        except Exception as e:
            logger.exception("Website generation call failed", extra={"step": "generate"})
            raise GenerationFailure(f"Failed to generate website: {e}") from e

        artifact = parse_generation(content)
        artifact.metadata.setdefault("model", self.model)
        return artifact


def get_content_generator() -> ContentGenerator:
    return ContentGenerator()
