"""
Identity Resolution

This package resolves Ethereum Name Service identities: addresses to their primary name and names to addresses,
along with the derived display name and avatar URL.

Key Components:
- ens.py: Address/name classification, reverse and forward resolution, avatar URL construction
- shadow.py: Secondary lookups against an ENS HTTP API, used to detect provider disagreement
- __main__.py: CLI interface for resolution

The resolution flow follows these steps:
1. Classify the input as an address (0x + 40 hex characters) or a name (anything else)
2. For addresses, checksum the address and reverse resolve it to a name
3. For names, derive the avatar URL and forward resolve the normalized name
4. Return a ResolutionResult; provider failures are folded into the result instead of raised

Name normalization and checksum encoding are delegated to the ens and eth-utils packages.
"""
