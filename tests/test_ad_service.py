"""Tests for prompt templating and response shaping."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from adgen.core.config import LLMSettings
from adgen.core.errors import LLMAppError
from adgen.schemas.ad import AdCopyResponse, AdRequest
from adgen.services.ad_service import (
    JSON_ONLY_SUFFIX,
    SYSTEM_PROMPT,
    AdService,
    build_user_message,
)


@pytest.fixture
def ad(valid_ad_payload) -> AdRequest:
    return AdRequest.model_validate(valid_ad_payload)


@pytest.fixture
def llm_settings() -> LLMSettings:
    return LLMSettings(provider="sarvam", model="sarvam-m", temperature=0.4, top_p=0.9, max_tokens=300)


class TestBuildUserMessage:
    def test_lists_every_field(self, ad) -> None:
        message = build_user_message(ad)

        assert "Business Name: Sharma Sweets" in message
        assert "Business Type: Sweet shop" in message
        assert "City: Jaipur" in message
        assert "Offer: 20% off on all mithai this Diwali" in message
        assert "Language: Hindi" in message
        assert "Tone: Festive" in message

    def test_describes_output_shape_and_ends_with_json_instruction(self, ad) -> None:
        message = build_user_message(ad)

        for key in ("whatsapp", "instagram", "poster_headline", "hashtags"):
            assert f'"{key}": "..."' in message
        assert message.endswith(JSON_ONLY_SUFFIX)


class TestAdService:
    @pytest.mark.asyncio
    async def test_forwards_system_prompt_and_options(self, ad, llm_settings, sample_ad_copy) -> None:
        llm = MagicMock()
        llm.generate_json = AsyncMock(return_value=sample_ad_copy)
        service = AdService(llm=llm, llm_settings=llm_settings)

        result = await service.generate(ad)

        assert isinstance(result, AdCopyResponse)
        assert result.poster_headline == sample_ad_copy["poster_headline"]
        kwargs = llm.generate_json.await_args.kwargs
        assert kwargs["system_prompt"] == SYSTEM_PROMPT
        assert kwargs["temperature"] == 0.4
        assert kwargs["top_p"] == 0.9
        assert kwargs["max_tokens"] == 300

    @pytest.mark.asyncio
    async def test_extra_model_keys_are_dropped(self, ad, llm_settings) -> None:
        llm = MagicMock()
        llm.generate_json = AsyncMock(return_value={"whatsapp": "hi", "reasoning": "..."})
        service = AdService(llm=llm, llm_settings=llm_settings)

        result = await service.generate(ad)

        assert result.model_dump() == {
            "whatsapp": "hi",
            "instagram": "",
            "poster_headline": "",
            "hashtags": "",
        }

    @pytest.mark.asyncio
    async def test_llm_errors_propagate(self, ad, llm_settings) -> None:
        llm = MagicMock()
        llm.generate_json = AsyncMock(
            side_effect=LLMAppError(code="upstream_unreachable", message="down")
        )
        service = AdService(llm=llm, llm_settings=llm_settings)

        with pytest.raises(LLMAppError):
            await service.generate(ad)


class TestAdCopyResponse:
    def test_hashtag_list_is_joined(self) -> None:
        copy = AdCopyResponse.model_validate({"hashtags": ["#Diwali", " #Jaipur ", ""]})

        assert copy.hashtags == "#Diwali #Jaipur"

    def test_null_and_numbers_coerced(self) -> None:
        copy = AdCopyResponse.model_validate({"whatsapp": None, "poster_headline": 20})

        assert copy.whatsapp == ""
        assert copy.poster_headline == "20"
