"""
Pneuma - On-chain interaction layer for Nuntius.

Provides the async JSON-RPC client, the submitter, the receipt tracker
and the outcome classifier.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
