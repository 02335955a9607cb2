from fastapi import APIRouter, Depends

from adgen.adapters.llm.base import AbstractLLMClient
from adgen.adapters.llm.factory import create_llm_client
from adgen.core.config import settings
from adgen.core.rate_limit import enforce_rate_limit
from adgen.schemas.ad import AdCopyResponse, AdRequest
from adgen.services.ad_service import AdService

router = APIRouter(tags=["Ads"])

_llm_client: AbstractLLMClient | None = None
_llm_config: tuple | None = None


def get_ad_service() -> AdService:
    """Build the ad service, reusing the upstream client across requests.

    The client is created lazily so a missing API key surfaces as a 500
    "Server misconfigured" response instead of failing at import time.

    Raises:
        ConfigurationAppError: If the upstream provider is not configured.
    """
    global _llm_client, _llm_config

    config = (
        settings.llm.provider,
        settings.llm.model,
        settings.llm.api_key,
        settings.llm.base_url,
        settings.llm.timeout_seconds,
    )
    if _llm_client is None or _llm_config != config:
        _llm_client = create_llm_client()
        _llm_config = config

    return AdService(llm=_llm_client, llm_settings=settings.llm)


@router.post(
    "/generate-ad",
    response_model=AdCopyResponse,
    dependencies=[Depends(enforce_rate_limit)],
)
async def generate_ad(
    ad: AdRequest,
    service: AdService = Depends(get_ad_service),
) -> AdCopyResponse:
    """Generate promotional copy for a local business.

    Renders the promotion into a prompt, calls the upstream model and returns
    WhatsApp, Instagram, poster headline and hashtag copy.

    Args:
        ad: Promotion details from the browser form.
        service: Ad generation service (injected).

    Returns:
        AdCopyResponse: Generated copy per channel.

    Raises:
        LLMAppError: Upstream failure, mapped to the upstream status or 502.
    """
    return await service.generate(ad)
