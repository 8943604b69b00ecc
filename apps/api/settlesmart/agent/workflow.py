"""Plan generation pipeline.

Flow:
    raw profile -> validate_profile -> build_prompt -> CompletionClient.complete
                -> normalize_plan -> Plan

Completion failures (configuration, upstream, transport) propagate to the
caller. Once raw text exists nothing raises: uninterpretable output becomes
the degraded plan.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from settlesmart.agent.normalizer import normalize_plan
from settlesmart.agent.profile import validate_profile
from settlesmart.agent.prompts import OutputContract, build_prompt
from settlesmart.config import get_settings
from settlesmart.llm.client import CompletionClient
from settlesmart.schemas import Plan, ProfileRequest


logger = logging.getLogger(__name__)


async def generate_plan(
    raw_profile: ProfileRequest | Mapping[str, Any] | None,
    client: CompletionClient,
    contract: OutputContract | str | None = None,
) -> Plan:
    """Run one generation attempt end to end.

    Args:
        raw_profile: request body, validated leniently
        client: completion client holding the credentials
        contract: output contract override; defaults to the configured one

    Returns:
        The normalized plan (possibly degraded)

    Raises:
        CompletionError: the service could not produce a raw completion
    """
    profile = validate_profile(raw_profile)
    payload = build_prompt(profile, contract or get_settings().output_contract)

    logger.info(
        f"Generating {profile.phase.value} plan {profile.origin!r} -> "
        f"{profile.destination!r} ({profile.visa_type.value})"
    )

    raw = await client.complete(payload)
    plan = normalize_plan(raw)

    if plan.degraded:
        logger.warning("Returning degraded plan")
    else:
        logger.info(
            f"Generated plan with {len(plan.weeks)} weeks, "
            f"{sum(len(w.items) for w in plan.weeks)} tasks"
        )
    return plan
