from unittest.mock import AsyncMock, MagicMock

import pytest

from vitality.schemas import Language
from vitality.services.assistant import FALLBACK_REPLY, AssistantSession


def _chat(reply=None, error=None):
    chat = MagicMock()
    chat.send_message = AsyncMock(return_value=MagicMock(text=reply), side_effect=error)
    return chat


@pytest.mark.asyncio
async def test_instruction_forces_language_and_embeds_profile(fake_client, profile):
    fake_client.start_chat.return_value = _chat("Aim for 170 g of protein.")

    session = AssistantSession(profile, Language.RU, client=fake_client)
    reply = await session.send("How much protein?")

    assert reply == "Aim for 170 g of protein."
    instruction = fake_client.start_chat.call_args.args[0]
    assert "Russian" in instruction
    assert "Muscle Gain" in instruction


@pytest.mark.asyncio
async def test_history_is_replayed_into_the_chat(fake_client, profile):
    fake_client.start_chat.return_value = _chat("Sure.")

    AssistantSession(
        profile,
        Language.EN,
        history=[{"role": "user", "text": "Hi"}, {"role": "model", "text": "Hello!"}],
        client=fake_client,
    )

    history = fake_client.start_chat.call_args.kwargs["history"]
    assert [turn.role for turn in history] == ["user", "model"]
    assert history[1].parts[0].text == "Hello!"


@pytest.mark.asyncio
async def test_chat_failure_falls_back(fake_client, profile):
    fake_client.start_chat.return_value = _chat(error=RuntimeError("network"))

    session = AssistantSession(profile, Language.EN, client=fake_client)

    assert await session.send("Hello") == FALLBACK_REPLY
