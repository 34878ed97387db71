"""
ITS Registry - Interchain Token Service registry validator

Checks proposed cross-chain token records against on-chain contract state
and CoinGecko metadata before they are merged into the registry.

Main Components:
- core.record_validator: per-record consistency checklist
- core.batch_validator: runs the checklist over a registry document
- core.web3_lookup / core.coingecko: RPC and HTTP lookup adapters
- cli.main: ``its-registry`` command line entry point
"""

__version__ = "0.1.0"

__all__ = []
