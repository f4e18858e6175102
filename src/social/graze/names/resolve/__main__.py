from typing import List
import argparse
import asyncio
import json
import logging
import os

from ens import AsyncENS
from web3 import AsyncHTTPProvider, AsyncWeb3

from social.graze.names.resolve.ens import DEFAULT_AVATAR_BASE_URL, resolve_subject

logger = logging.getLogger(__name__)


async def realMain() -> None:
    parser = argparse.ArgumentParser(
        prog="ens-resolve", description="Resolve ENS names and addresses"
    )
    parser.add_argument("subject", nargs="+", help="The address(es) or name(s) to resolve.")
    parser.add_argument(
        "--rpc-url",
        default=os.getenv("ETHEREUM_RPC_URL"),
        help="The Ethereum JSON-RPC endpoint. Defaults to ETHEREUM_RPC_URL.",
    )
    parser.add_argument(
        "--avatar-base-url",
        default=DEFAULT_AVATAR_BASE_URL,
        help="The metadata service prefix used to build avatar URLs.",
    )

    args = vars(parser.parse_args())
    if not args.get("rpc_url"):
        parser.error("--rpc-url or ETHEREUM_RPC_URL is required")

    subjects: List[str] = args.get("subject", [])

    provider = AsyncHTTPProvider(args.get("rpc_url"))
    ns = AsyncENS.from_web3(AsyncWeb3(provider))
    try:
        for subject in subjects:
            result = await resolve_subject(
                ns, subject.lower(), args.get("avatar_base_url")
            )
            print(json.dumps(result.to_json()))
    finally:
        await provider.disconnect()


def main() -> None:
    logging.basicConfig()
    asyncio.run(realMain())


if __name__ == "__main__":
    main()
