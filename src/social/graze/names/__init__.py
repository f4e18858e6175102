"""
ENS Name Resolver

This module implements a small HTTP service that resolves Ethereum Name Service identities. Given an Ethereum
address it returns the primary ENS name, and given an ENS name it returns the address it points to. Both come
with a display name and an avatar URL.

Key Components:
- app: Web application layer with request handlers and server configuration
- model: Result and health models
- resolve: ENS resolution against an Ethereum JSON-RPC provider

Architecture Overview:
1. Canonicalization:
   - Mixed case input is redirected to its lower case URL so each identity has one cacheable URL

2. Resolution:
   - Addresses are checksummed and reverse resolved to a name
   - Names are normalized and forward resolved to an address
   - Avatar URLs are derived from the name without any network call

3. Response:
   - Successful results are marked cacheable by shared caches for a day
   - Provider failures return the partial result with the error and a 500 status

A single web3 client is created at startup and shared by all in-flight requests.
"""
