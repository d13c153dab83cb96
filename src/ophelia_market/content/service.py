"""Content service — AI-written descriptions, stories, and marketing copy."""

import json
import logging
import re
from typing import Any

from ophelia_market.common.exceptions import ValidationFailedError
from ophelia_market.content.generator import GenerativeClient
from ophelia_market.content.prompts import DEFAULT_DESCRIPTION, DEFAULT_STORY, PromptConfig

logger = logging.getLogger(__name__)

MAX_TITLE_LEN = 200
MAX_DESCRIPTION_LEN = 2000
INSTAGRAM_FALLBACK_LEN = 500
FACEBOOK_FALLBACK_LEN = 700

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def _text(body: dict[str, Any], key: str) -> str:
    value = body.get(key)
    return value if isinstance(value, str) else ""


def _require(body: dict[str, Any], key: str, message: str) -> str:
    value = _text(body, key)
    if not value.strip():
        raise ValidationFailedError(message)
    return value


def _optional(body: dict[str, Any], key: str, default: str) -> str:
    value = body.get(key)
    if isinstance(value, list):
        value = ", ".join(str(v) for v in value)
    if not isinstance(value, str) or not value.strip():
        return default
    return value.strip()


def parse_marketing_reply(reply: str) -> dict[str, str]:
    """Pull {instagram, facebook, email} out of a model reply.

    The model is asked for JSON but may wrap it in prose or code fences.
    Without a JSON object the raw text is cut per platform; with an
    unparseable one the raw text is decorated per platform instead.
    """
    match = _JSON_OBJECT_RE.search(reply)
    if not match:
        return {
            "instagram": reply[:INSTAGRAM_FALLBACK_LEN],
            "facebook": reply[:FACEBOOK_FALLBACK_LEN],
            "email": reply,
        }
    try:
        parsed = json.loads(match.group(0))
        if not isinstance(parsed, dict):
            raise ValueError("marketing reply is not an object")
    except ValueError:
        return {
            "instagram": reply[:INSTAGRAM_FALLBACK_LEN]
            + "\n\n#handcrafted #artisan #handmade #shoplocal #supportartisans",
            "facebook": reply[:FACEBOOK_FALLBACK_LEN]
            + "\n\nWhat do you think? Comment below! \U0001F447",
            "email": f"Subject: Discover This Beautiful Handcrafted Treasure\n\n{reply}",
        }
    return {
        platform: str(parsed.get(platform, ""))
        for platform in ("instagram", "facebook", "email")
    }


class ContentService:
    """Validates request bodies, renders prompts, reshapes replies."""

    def __init__(self, client: GenerativeClient, prompts: PromptConfig):
        self.client = client
        self.prompts = prompts

    async def enhance_description(self, body: dict[str, Any]) -> dict[str, str]:
        title = _require(body, "title", "Product title is required")
        if len(title) > MAX_TITLE_LEN:
            raise ValidationFailedError("Product title too long (max 200 characters)")
        description = _text(body, "description")
        if len(description) > MAX_DESCRIPTION_LEN:
            raise ValidationFailedError("Description too long (max 2000 characters)")
        base_description = description.strip() or DEFAULT_DESCRIPTION

        template = self.prompts.enhance_description
        prompt = template.render(
            title=title,
            category=_optional(body, "category", "Handcrafted Item"),
            materials=_optional(body, "materials", "Traditional materials"),
            description=base_description,
        )
        logger.info("Requesting description enhancement")
        reply = await self.client.generate(prompt, template.params, "Failed to enhance description")
        return {"enhancedDescription": reply or base_description}

    async def generate_story(self, body: dict[str, Any]) -> dict[str, str]:
        title = _require(body, "productTitle", "Product title is required")
        if len(title) > MAX_TITLE_LEN:
            raise ValidationFailedError("Product title too long (max 200 characters)")

        template = self.prompts.product_story
        prompt = template.render(
            title=title,
            category=_optional(body, "category", "Handcrafted Item"),
            materials=_optional(body, "materials", "Traditional materials"),
            craft_type=_optional(body, "craftType", "Traditional Craft"),
        )
        logger.info("Requesting product story")
        reply = await self.client.generate(prompt, template.params, "Failed to generate story")
        return {"story": reply or DEFAULT_STORY}

    async def generate_marketing(self, body: dict[str, Any]) -> dict[str, Any]:
        title = _require(body, "productTitle", "Product title is required")
        description = _require(body, "description", "Product description is required")
        if len(title) > MAX_TITLE_LEN or len(description) > MAX_DESCRIPTION_LEN:
            raise ValidationFailedError("Input too long")

        template = self.prompts.marketing
        prompt = template.render(
            title=title,
            description=description,
            category=_optional(body, "category", "Handcrafted"),
            target_audience=_optional(body, "targetAudience", "Craft enthusiasts"),
        )
        logger.info("Requesting marketing content")
        reply = await self.client.generate(prompt, template.params, "Failed to generate marketing content")
        return {"content": parse_marketing_reply(reply)}
