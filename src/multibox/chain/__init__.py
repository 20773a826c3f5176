"""
Chain - On-chain interaction layer for the Multibox client.

Provides an async JSON-RPC client, contract artifact handling, and
transaction signing for Ethereum-compatible nodes.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
