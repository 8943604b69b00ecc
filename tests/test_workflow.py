from __future__ import annotations

import asyncio

import pytest

from settlesmart.agent.normalizer import DEGRADED_NOTE
from settlesmart.agent.prompts import OutputContract
from settlesmart.agent.workflow import generate_plan
from settlesmart.llm.errors import TransportError, UpstreamError

from conftest import FakeCompletionClient


PROFILE = {
    "phase": "before",
    "origin": "Mexico",
    "destination": "Canada",
    "visaType": "family",
    "anchorDate": "2026-11-15",
}


def test_generate_plan_end_to_end(sample_plan_json: str) -> None:
    client = FakeCompletionClient(sample_plan_json)

    plan = asyncio.run(generate_plan(PROFILE, client))

    assert len(client.calls) == 1
    payload = client.calls[0]
    assert "From: Mexico" in payload.user
    assert "Visa type: family" in payload.user
    assert plan.degraded is False
    assert sum(len(w.items) for w in plan.weeks) == 6


def test_contract_override_is_used() -> None:
    client = FakeCompletionClient('{"weeks": []}')
    asyncio.run(generate_plan(PROFILE, client, contract=OutputContract.JSON_OBJECT))
    assert client.calls[0].contract is OutputContract.JSON_OBJECT


def test_malformed_profile_still_generates() -> None:
    client = FakeCompletionClient('{"weeks": []}')
    asyncio.run(generate_plan({"phase": "sometime", "visaType": "tourist"}, client))
    user = client.calls[0].user
    assert "Phase: after" in user
    assert "Visa type: work" in user


def test_empty_object_completion_degrades() -> None:
    plan = asyncio.run(generate_plan(PROFILE, FakeCompletionClient("{}")))
    assert plan.weeks == []
    assert plan.country_notes == DEGRADED_NOTE


def test_garbage_completion_degrades() -> None:
    plan = asyncio.run(generate_plan(PROFILE, FakeCompletionClient("Sure! Here is your plan:")))
    assert plan.degraded is True


@pytest.mark.parametrize("error", [UpstreamError(500, "boom"), TransportError("reset")])
def test_completion_errors_propagate(error: Exception) -> None:
    client = FakeCompletionClient(error=error)
    with pytest.raises(type(error)):
        asyncio.run(generate_plan(PROFILE, client))
    assert len(client.calls) == 1
