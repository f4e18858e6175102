"""Shadow resolution against an independent ENS HTTP API.

The shadow lookup never feeds into a response. Its result is only compared against what the RPC backed resolver
returned so that disagreements between the two providers show up in logs and metrics.
"""

import logging
from typing import List, Optional
from urllib.parse import quote

from aiohttp import ClientSession
from pydantic import BaseModel

from social.graze.names.model.resolution import ResolutionResult

logger = logging.getLogger(__name__)


class ShadowResult(BaseModel):
    """Subset of a shadow provider response that can be compared."""

    address: Optional[str] = None
    name: Optional[str] = None


async def shadow_resolve(
    session: ClientSession, url_template: str, subject: str
) -> Optional[ShadowResult]:
    """Resolve a subject through the shadow provider.

    Args:
        session: HTTP client session
        url_template: Provider URL with a {subject} placeholder
        subject: Address or name to resolve

    Returns:
        ShadowResult if the provider answered, None on a non-200 response
    """
    url = url_template.format(subject=quote(subject, safe=""))
    async with session.get(url) as resp:
        if resp.status != 200:
            logger.debug("shadow provider returned %s for %s", resp.status, subject)
            return None
        body = await resp.json()
        if not isinstance(body, dict):
            return None
        return ShadowResult(
            address=body.get("address") or None, name=body.get("name") or None
        )


def compare_results(primary: ResolutionResult, shadow: ShadowResult) -> List[str]:
    """Return the names of the fields the two providers disagree on."""
    mismatched = []
    if (primary.address or "").lower() != (shadow.address or "").lower():
        mismatched.append("address")
    if primary.name != shadow.name:
        mismatched.append("name")
    return mismatched
