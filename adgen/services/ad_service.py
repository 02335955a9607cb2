"""Ad generation service: prompt templating and response shaping.

Turns a validated form submission into the upstream chat request and maps
the model's JSON answer onto the response the browser renders.
"""

import logging

from adgen.adapters.llm.base import AbstractLLMClient
from adgen.core.config import LLMSettings
from adgen.schemas.ad import AdCopyResponse, AdRequest

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a marketing expert specializing in Indian regional businesses. "
    "Generate culturally relevant, engaging advertisements in the requested "
    "Indian language. Keep tone appropriate and include local flavor if relevant."
)

JSON_ONLY_SUFFIX = "Return only valid JSON. No explanations. No markdown."


def build_user_message(ad: AdRequest) -> str:
    """Render the user message for a promotion.

    Args:
        ad: Validated form submission.

    Returns:
        Prompt text listing the promotion details and the expected JSON shape.
    """
    return f"""Generate a promotional advertisement with the following details:

Business Name: {ad.businessName}
Business Type: {ad.businessType}
City: {ad.city}
Offer: {ad.offer}
Language: {ad.language}
Tone: {ad.tone}

Return output in this JSON format only:
{{
  "whatsapp": "...",
  "instagram": "...",
  "poster_headline": "...",
  "hashtags": "..."
}}

{JSON_ONLY_SUFFIX}"""


class AdService:
    """Service generating ad copy through the upstream LLM.

    Attributes:
        llm: LLM client adapter for generating structured JSON.
        options: Sampling parameters forwarded with every request.
    """

    def __init__(self, llm: AbstractLLMClient, llm_settings: LLMSettings) -> None:
        self.llm = llm
        self.options = {
            "temperature": llm_settings.temperature,
            "top_p": llm_settings.top_p,
            "max_tokens": llm_settings.max_tokens,
        }

    async def generate(self, ad: AdRequest) -> AdCopyResponse:
        """Generate ad copy for the submitted promotion.

        Args:
            ad: Validated form submission.

        Returns:
            AdCopyResponse shaped from the model's JSON answer.

        Raises:
            LLMAppError: If the upstream call fails or returns unparseable content.
        """
        raw = await self.llm.generate_json(
            build_user_message(ad),
            system_prompt=SYSTEM_PROMPT,
            **self.options,
        )

        result = AdCopyResponse.model_validate(raw)
        logger.info(
            "ad.generated",
            extra={
                "language": ad.language,
                "fields_present": sorted(k for k in AdCopyResponse.model_fields if raw.get(k)),
            },
        )
        return result
