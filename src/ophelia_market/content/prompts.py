"""Prompt templates and generation parameters for product copy."""

from dataclasses import dataclass, field

DEFAULT_DESCRIPTION = "A handcrafted artisan product."
DEFAULT_STORY = "A beautiful handcrafted piece made with care and tradition."

ENHANCE_DESCRIPTION_TEMPLATE = """You are an expert product copywriter for artisan crafts and handmade goods. Your task is to enhance the product description to make it more compelling and professional.

Product Information:
- Title: {title}
- Category: {category}
- Materials: {materials}
- Current Description: {description}

Create an enhanced product description (150-300 words) that:
1. Opens with a captivating hook that highlights uniqueness
2. Describes the product's features, materials, and craftsmanship in vivid detail
3. Uses sensory language (how it looks, feels, sounds)
4. Explains the value and benefits to the customer
5. Mentions care instructions or usage suggestions if relevant
6. Ends with an emotional appeal or call-to-action

Write in a warm, professional tone. Make it engaging and customer-focused. Return ONLY the enhanced description, no labels or extra formatting."""

PRODUCT_STORY_TEMPLATE = """You are a master storyteller for handcrafted artisan products. Create a compelling, authentic story for this product that connects with customers emotionally.

Product Details:
- Title: {title}
- Category: {category}
- Materials: {materials}
- Craft Type: {craft_type}

Write a captivating story (200-400 words) that:
1. Begins with the artisan's passion or heritage
2. Describes the crafting process with sensory details
3. Explains what makes this piece unique and special
4. Connects the craft to cultural traditions or personal meaning
5. Ends with why customers will treasure this item

Write in a warm, engaging tone. Make it personal and authentic. Return ONLY the story text, no labels or formatting."""

MARKETING_TEMPLATE = """You are a social media marketing expert for artisan crafts. Create engaging marketing content for different platforms.

Product Information:
- Title: {title}
- Description: {description}
- Category: {category}
- Target Audience: {target_audience}

Generate marketing content for:

1. INSTAGRAM CAPTION (100-150 words):
- Start with an attention-grabbing hook
- Include 5-8 relevant hashtags
- Emoji usage for visual appeal
- Call-to-action at the end

2. FACEBOOK POST (150-200 words):
- More detailed storytelling
- Engaging question to encourage comments
- Include hashtags
- Clear call-to-action

3. EMAIL CAMPAIGN (200-250 words):
- Compelling subject line at the start
- Personalized greeting
- Product benefits and story
- Urgency or special offer hint
- Clear purchase link placeholder

Format your response as JSON:
{{
  "instagram": "...",
  "facebook": "...",
  "email": "..."
}}"""


@dataclass(frozen=True)
class GenerationParams:
    temperature: float = 0.8
    top_k: int = 40
    top_p: float = 0.95
    max_output_tokens: int = 800

    def to_payload(self) -> dict:
        return {
            "temperature": self.temperature,
            "topK": self.top_k,
            "topP": self.top_p,
            "maxOutputTokens": self.max_output_tokens,
        }


@dataclass(frozen=True)
class PromptSpec:
    template: str
    params: GenerationParams

    def render(self, **fields: str) -> str:
        return self.template.format(**fields)


@dataclass(frozen=True)
class PromptConfig:
    """All prompts the content service sends, built once at startup."""

    enhance_description: PromptSpec = field(default_factory=lambda: PromptSpec(
        ENHANCE_DESCRIPTION_TEMPLATE, GenerationParams(temperature=0.8, max_output_tokens=800),
    ))
    product_story: PromptSpec = field(default_factory=lambda: PromptSpec(
        PRODUCT_STORY_TEMPLATE, GenerationParams(temperature=0.9, max_output_tokens=1000),
    ))
    marketing: PromptSpec = field(default_factory=lambda: PromptSpec(
        MARKETING_TEMPLATE, GenerationParams(temperature=0.8, max_output_tokens=1200),
    ))
