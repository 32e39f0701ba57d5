import logging
from typing import Optional

from ..ai import prompts
from ..ai.utils import parse_data_uri, to_data_uri
from ..core.ai_client import AIClient, ai_client
from ..settings import settings

logger = logging.getLogger("vitality.images")


async def synthesize_image(subject: str, client: Optional[AIClient] = None) -> str:
    """Photograph-style image for `subject` as a data URI, or "" when none came back."""
    client = client or ai_client
    image = await client.generate_image(
        prompts.meal_image_prompt(subject),
        aspect_ratio=settings.image_aspect_ratio,
    )
    if image is None:
        logger.warning("No image payload for %r", subject)
        return ""
    return to_data_uri(image)


async def edit_image(current: str, instruction: str, client: Optional[AIClient] = None) -> str:
    """
    Apply a natural-language edit to an existing image.
    Returns the original locator unchanged when the edit yields no payload.
    """
    client = client or ai_client
    try:
        source = parse_data_uri(current)
    except ValueError as e:
        logger.error(f"Cannot edit image: {e}")
        return current

    edited = await client.generate_image(prompts.image_edit_prompt(instruction), source=source)
    if edited is None:
        logger.warning("Image edit returned no payload, keeping the original")
        return current
    return to_data_uri(edited)
