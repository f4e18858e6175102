"""ENS address and name resolution.

Resolves Ethereum addresses to their primary ENS name (reverse resolution) and ENS names to addresses (forward
resolution) through a shared AsyncENS client, and shapes both into a ResolutionResult.
"""

import logging
import re
from typing import List, Optional, Union
from urllib.parse import quote

from ens import AsyncENS
from ens.exceptions import InvalidName
from ens.utils import normalize_name
from eth_utils import to_checksum_address
import sentry_sdk

from social.graze.names.model.resolution import ResolutionResult

logger = logging.getLogger(__name__)

DEFAULT_AVATAR_BASE_URL = "https://metadata.ens.domains/mainnet/avatar/"

ADDRESS_PATTERN = re.compile(r"0x[0-9a-fA-F]{40}")

ELIDE_PATTERN = re.compile(r"^(0x[0-9a-fA-F]{3})[0-9a-fA-F]+([0-9a-fA-F]{4})$")

# Characters encodeURIComponent leaves alone, minus the ones quote() never touches.
_URI_COMPONENT_SAFE = "!~*'()"


def first_param(value: Union[str, List[str]]) -> str:
    """Return the first value of a parameter that may have matched more than once."""
    if isinstance(value, (list, tuple)):
        return value[0]
    return value


def is_address(value: str) -> bool:
    """Check if value is a 0x prefixed, 20 byte hex address.

    Args:
        value: String to check

    Returns:
        True if value looks like an address, regardless of casing
    """
    return value is not None and ADDRESS_PATTERN.fullmatch(value) is not None


def elide_address(address: str) -> str:
    """Shorten an address to 0x + 3 hex characters, an ellipsis and the last 4 hex characters."""
    return ELIDE_PATTERN.sub(r"\1…\2", address)


def avatar_url(name: str, base_url: str = DEFAULT_AVATAR_BASE_URL) -> str:
    """Build the metadata service avatar URL for an ENS name.

    The URL is only constructed, never fetched, so it may not point at real content.

    Raises:
        InvalidName: If the name cannot be normalized
    """
    return f"{base_url}{quote(normalize_name(name), safe=_URI_COMPONENT_SAFE)}"


async def resolve_address(
    ns: AsyncENS,
    lowercase_address: str,
    avatar_base_url: str = DEFAULT_AVATAR_BASE_URL,
) -> ResolutionResult:
    """Reverse resolve an address to its primary ENS name.

    Args:
        ns: Shared ENS client
        lowercase_address: Syntactically valid address
        avatar_base_url: Metadata service prefix for avatar URLs

    Returns:
        ResolutionResult with the checksummed address. On provider failure the result carries the elided address
        as display name and the error message.
    """
    address = to_checksum_address(lowercase_address)
    display_name = elide_address(address)

    try:
        name: Optional[str] = await ns.name(address)
        if name:
            display_name = name
        avatar = avatar_url(name, avatar_base_url) if name else None
        return ResolutionResult(
            address=address, name=name or None, display_name=display_name, avatar=avatar
        )
    except Exception as e:
        logger.exception("error resolving address: %s", address)
        sentry_sdk.capture_exception(e)
        return ResolutionResult(
            address=address,
            name=None,
            display_name=display_name,
            avatar=None,
            error=str(e) or type(e).__name__,
        )


async def resolve_name(
    ns: AsyncENS,
    name: str,
    avatar_base_url: str = DEFAULT_AVATAR_BASE_URL,
) -> ResolutionResult:
    """Forward resolve an ENS name to an address.

    The avatar is derived up front so that it is returned even when forward resolution fails.

    Args:
        ns: Shared ENS client
        name: Name to resolve, used verbatim as the display name
        avatar_base_url: Metadata service prefix for avatar URLs

    Returns:
        ResolutionResult with the input name. On failure address is None and error is set.
    """
    try:
        avatar = avatar_url(name, avatar_base_url)
    except InvalidName:
        avatar = f"{avatar_base_url}{quote(name, safe=_URI_COMPONENT_SAFE)}"

    try:
        address = await ns.address(normalize_name(name))
        return ResolutionResult(
            address=address, name=name, display_name=name, avatar=avatar
        )
    except Exception as e:
        logger.exception("error resolving name: %s", name)
        sentry_sdk.capture_exception(e)
        return ResolutionResult(
            address=None,
            name=name,
            display_name=name,
            avatar=avatar,
            error=str(e) or type(e).__name__,
        )


async def resolve_subject(
    ns: AsyncENS,
    subject: str,
    avatar_base_url: str = DEFAULT_AVATAR_BASE_URL,
) -> ResolutionResult:
    """Resolve an address or a name, whichever the subject is.

    Anything that is not an address is attempted as a name.
    """
    if is_address(subject):
        return await resolve_address(ns, subject, avatar_base_url)
    return await resolve_name(ns, subject, avatar_base_url)
