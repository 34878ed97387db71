"""
ITS Registry - Token Record Validation

Checks one token record against on-chain state and third-party metadata:
- tokenId identity and format
- CoinGecko symbol
- deployer / deploySalt syntax
- per chain: contract code, ERC20 name/symbol (origin: prettySymbol/decimals),
  token manager wiring and implementation type
- origin chain presence
- tokenId recomputation through the origin chain's ITS contract
- SVG icon availability

Every failed check becomes one ValidationFinding; a failing check never
stops the ones after it unless the value it needs does not exist.
"""

from __future__ import annotations

import logging
import re

from eth_utils import is_address

from its_registry.core.config import ValidatorSettings
from its_registry.core.findings import ErrorKind, ValidationFinding
from its_registry.core.lookup_ports import (
    ChainLookup,
    EndpointResolver,
    IconLookup,
    MetadataLookup,
)
from its_registry.core.models import ChainEntry, TokenRecord
from its_registry.core.registry_exceptions import LookupFailure
from its_registry.core.token_manager_types import REGISTRY_NAMES, code_of, is_known_type, name_of

logger = logging.getLogger(__name__)

_BYTES32_HEX = re.compile(r"^0x[0-9a-fA-F]{64}$")

SVG_CONTENT_TYPE = "image/svg+xml"


def is_bytes32_hex(value: str) -> bool:
    return isinstance(value, str) and bool(_BYTES32_HEX.match(value))


def _same_text(left: str, right: str) -> bool:
    return left.lower() == right.lower()


def _is_evm_address(value: str) -> bool:
    # Letter case carries no meaning here, so EIP-55 checksums are not enforced
    return is_address(value.lower())


class _Findings:
    """Finding collector scoped to one record."""

    def __init__(self, token_id: str) -> None:
        self.token_id = token_id
        self.items: list[ValidationFinding] = []

    def add(self, kind: ErrorKind, message: str, chain_id: str | None = None) -> None:
        self.items.append(
            ValidationFinding(kind=kind, token_id=self.token_id, message=message, chain_id=chain_id)
        )


class RecordValidator:
    """
    Validates a single TokenRecord.

    The validator holds no per-record state, so one instance can be shared
    by concurrent batch workers as long as the injected ports are
    thread-safe.
    """

    def __init__(
        self,
        chain_directory: EndpointResolver,
        chain_lookup: ChainLookup,
        metadata_lookup: MetadataLookup | None = None,
        icon_lookup: IconLookup | None = None,
        settings: ValidatorSettings | None = None,
    ):
        self.chain_directory = chain_directory
        self.chain_lookup = chain_lookup
        self.metadata_lookup = metadata_lookup
        self.icon_lookup = icon_lookup
        self.settings = settings or ValidatorSettings()

    def validate(self, token_id: str, record: TokenRecord) -> list[ValidationFinding]:
        """
        Run the full checklist for one record.

        Args:
            token_id: Key the record is stored under in the registry
            record: Parsed token record

        Returns:
            Findings in checklist order; empty if the record is valid
        """
        findings = _Findings(token_id)
        logger.info("Validating token", extra={"token_id": token_id, "chains": len(record.chains)})

        self._check_identity(token_id, record, findings)
        self._check_external_metadata(token_id, record, findings)
        inputs_ok = self._check_deployment_inputs(token_id, record, findings)

        for entry in record.chains:
            logger.debug(
                "Validating chain",
                extra={"token_id": token_id, "chain_id": entry.axelar_chain_id},
            )
            self._check_chain(token_id, record, entry, findings)

        has_origin = self._check_origin_chain(token_id, record, findings)
        if has_origin and inputs_ok:
            self._check_interchain_token_id(token_id, record, findings)

        self._check_icon(token_id, record, findings)

        if findings.items:
            logger.info(
                "Token failed validation",
                extra={"token_id": token_id, "findings": len(findings.items)},
            )
        return findings.items

    # ------------------------------------------------------------------
    # Record-level checks
    # ------------------------------------------------------------------

    def _check_identity(self, token_id: str, record: TokenRecord, findings: _Findings) -> None:
        if not is_bytes32_hex(token_id):
            findings.add(
                ErrorKind.FORMAT_ERROR,
                f"Malformed tokenId {token_id}: expected 0x-prefixed 32-byte hex",
            )
        if not _same_text(token_id, record.token_id):
            findings.add(
                ErrorKind.STRUCTURAL_MISMATCH,
                f"Mismatch in tokenId: {token_id} vs {record.token_id}",
            )

    def _check_external_metadata(self, token_id: str, record: TokenRecord, findings: _Findings) -> None:
        if not record.coin_gecko_id:
            if self.settings.require_coingecko_id:
                findings.add(
                    ErrorKind.STRUCTURAL_MISMATCH,
                    f"CoinGecko ID is missing for token {token_id}",
                )
            return
        if self.metadata_lookup is None:
            logger.debug("No metadata lookup configured, skipping CoinGecko check")
            return

        try:
            metadata = self.metadata_lookup.fetch_external_metadata(record.coin_gecko_id)
        except LookupFailure as exc:
            findings.add(
                ErrorKind.LOOKUP_FAILURE,
                f"Error fetching data from CoinGecko for token {token_id}: {exc.message}",
            )
            return

        if metadata is None:
            findings.add(
                ErrorKind.EXTERNAL_METADATA_NOT_FOUND,
                f"CoinGecko ID {record.coin_gecko_id} not found for token {token_id}",
            )
        elif not _same_text(metadata.symbol, record.pretty_symbol):
            findings.add(
                ErrorKind.EXTERNAL_METADATA_MISMATCH,
                f"CoinGecko symbol ({metadata.symbol}) does not match prettySymbol "
                f"({record.pretty_symbol}) for token {token_id}",
            )

    def _check_deployment_inputs(self, token_id: str, record: TokenRecord, findings: _Findings) -> bool:
        """Return True if deployer and salt are usable for recomputation."""
        ok = True
        if not _is_evm_address(record.deployer):
            findings.add(
                ErrorKind.FORMAT_ERROR,
                f"Invalid deployer address {record.deployer} for token {token_id}",
            )
            ok = False
        if not is_bytes32_hex(record.deploy_salt):
            findings.add(
                ErrorKind.FORMAT_ERROR,
                f"Invalid deploySalt {record.deploy_salt} for token {token_id}: expected 32-byte hex",
            )
            ok = False
        return ok

    def _check_origin_chain(self, token_id: str, record: TokenRecord, findings: _Findings) -> bool:
        count = len(record.origin_entries)
        if count == 0:
            findings.add(
                ErrorKind.STRUCTURAL_MISMATCH,
                f"Origin chain {record.origin_axelar_chain_id} not found in chains list for token {token_id}",
            )
            return False
        if count > 1:
            findings.add(
                ErrorKind.STRUCTURAL_MISMATCH,
                f"Origin chain {record.origin_axelar_chain_id} appears {count} times in chains list "
                f"for token {token_id}",
            )
        return True

    def _check_interchain_token_id(self, token_id: str, record: TokenRecord, findings: _Findings) -> None:
        origin = record.origin_axelar_chain_id
        endpoint = self.chain_directory.resolve(origin)
        if endpoint is None:
            # Already reported by the per-chain loop
            logger.debug("Origin chain unresolved, skipping tokenId recomputation", extra={"chain_id": origin})
            return

        try:
            calculated = self.chain_lookup.recompute_token_id(endpoint, record.deployer, record.deploy_salt)
        except LookupFailure as exc:
            findings.add(
                ErrorKind.LOOKUP_FAILURE,
                f"Could not recompute interchainTokenId on origin chain {origin} for token {token_id}: "
                f"{exc.message}",
                chain_id=origin,
            )
            return

        if not _same_text(calculated, token_id):
            findings.add(
                ErrorKind.ON_CHAIN_MISMATCH,
                f"Mismatch in interchainTokenId for token {token_id}: deployer or deploySalt could be "
                f"incorrect (expected {token_id}, calculated {calculated}, deployer {record.deployer}, "
                f"deploySalt {record.deploy_salt})",
                chain_id=origin,
            )

    def _check_icon(self, token_id: str, record: TokenRecord, findings: _Findings) -> None:
        url = record.icon_urls.svg
        if not url or not self.settings.check_icons or self.icon_lookup is None:
            return
        try:
            content_type = self.icon_lookup.fetch_content_type(url)
        except LookupFailure as exc:
            findings.add(
                ErrorKind.LOOKUP_FAILURE,
                f"Error accessing SVG icon URL {url} for token {token_id}: {exc.message}",
            )
            return
        if SVG_CONTENT_TYPE not in content_type.lower():
            findings.add(
                ErrorKind.EXTERNAL_METADATA_MISMATCH,
                f"Invalid SVG icon URL {url} for token {token_id}: content type '{content_type}'",
            )

    # ------------------------------------------------------------------
    # Per-chain checks
    # ------------------------------------------------------------------

    def _check_chain(
        self, token_id: str, record: TokenRecord, entry: ChainEntry, findings: _Findings
    ) -> None:
        chain_id = entry.axelar_chain_id

        if not is_known_type(entry.token_manager_type):
            findings.add(
                ErrorKind.FORMAT_ERROR,
                f"Unknown tokenManagerType '{entry.token_manager_type}' on chain {chain_id} for token "
                f"{token_id}; expected one of {', '.join(REGISTRY_NAMES)}",
                chain_id=chain_id,
            )

        endpoint = self.chain_directory.resolve(chain_id)
        if endpoint is None:
            findings.add(
                ErrorKind.CONFIGURATION_ERROR,
                f"No RPC URL found for chain {chain_id} (token {token_id})",
                chain_id=chain_id,
            )
            return

        if self._has_code(endpoint, entry.token_address, "Token address", token_id, chain_id, findings):
            self._check_token_details(endpoint, token_id, record, entry, findings)

        if self._has_code(endpoint, entry.token_manager, "Token manager", token_id, chain_id, findings):
            self._check_token_manager(endpoint, token_id, entry, findings)

    def _has_code(
        self,
        endpoint: str,
        address: str,
        label: str,
        token_id: str,
        chain_id: str,
        findings: _Findings,
    ) -> bool:
        """Return True only if the address is confirmed to hold code."""
        if not _is_evm_address(address):
            findings.add(
                ErrorKind.FORMAT_ERROR,
                f"{label} {address} on chain {chain_id} is not a valid address (token {token_id})",
                chain_id=chain_id,
            )
            return False
        try:
            has_code = self.chain_lookup.has_contract_code(endpoint, address)
        except LookupFailure as exc:
            findings.add(
                ErrorKind.LOOKUP_FAILURE,
                f"Could not fetch code for {label.lower()} {address} on chain {chain_id} "
                f"(token {token_id}): {exc.message}",
                chain_id=chain_id,
            )
            return False
        if not has_code:
            findings.add(
                ErrorKind.MISSING_CONTRACT,
                f"{label} {address} does not exist on chain {chain_id} (token {token_id})",
                chain_id=chain_id,
            )
        return has_code

    def _check_token_details(
        self,
        endpoint: str,
        token_id: str,
        record: TokenRecord,
        entry: ChainEntry,
        findings: _Findings,
    ) -> None:
        chain_id = entry.axelar_chain_id
        try:
            metadata = self.chain_lookup.read_token_metadata(endpoint, entry.token_address)
        except LookupFailure as exc:
            findings.add(
                ErrorKind.LOOKUP_FAILURE,
                f"Could not read token metadata for {entry.token_address} on chain {chain_id} "
                f"(token {token_id}): {exc.message}",
                chain_id=chain_id,
            )
            return

        if not _same_text(metadata.name, entry.name):
            findings.add(
                ErrorKind.ON_CHAIN_MISMATCH,
                f"Token name mismatch on chain {chain_id} for token {token_id}: "
                f"expected {entry.name}, got {metadata.name}",
                chain_id=chain_id,
            )
        if not _same_text(metadata.symbol, entry.symbol):
            findings.add(
                ErrorKind.ON_CHAIN_MISMATCH,
                f"Token symbol mismatch on chain {chain_id} for token {token_id}: "
                f"expected {entry.symbol}, got {metadata.symbol}",
                chain_id=chain_id,
            )

        if not record.is_origin(entry):
            return
        if not _same_text(metadata.symbol, record.pretty_symbol):
            findings.add(
                ErrorKind.ON_CHAIN_MISMATCH,
                f"Token symbol mismatch on origin chain {chain_id} for token {token_id}: "
                f"expected prettySymbol {record.pretty_symbol}, got {metadata.symbol}",
                chain_id=chain_id,
            )
        if metadata.decimals != record.decimals:
            findings.add(
                ErrorKind.ON_CHAIN_MISMATCH,
                f"Token decimals mismatch on origin chain {chain_id} for token {token_id}: "
                f"expected {record.decimals}, got {metadata.decimals}",
                chain_id=chain_id,
            )

    def _check_token_manager(
        self, endpoint: str, token_id: str, entry: ChainEntry, findings: _Findings
    ) -> None:
        chain_id = entry.axelar_chain_id
        try:
            info = self.chain_lookup.read_manager_info(endpoint, entry.token_manager)
        except LookupFailure as exc:
            findings.add(
                ErrorKind.LOOKUP_FAILURE,
                f"Could not read token manager {entry.token_manager} on chain {chain_id} "
                f"(token {token_id}): {exc.message}",
                chain_id=chain_id,
            )
            return

        if not _same_text(info.managed_token_address, entry.token_address):
            findings.add(
                ErrorKind.ON_CHAIN_MISMATCH,
                f"Token manager {entry.token_manager} on chain {chain_id} does not manage the specified "
                f"token address {entry.token_address} (manages {info.managed_token_address}, token {token_id})",
                chain_id=chain_id,
            )

        # Unknown names were reported as a format error above
        if is_known_type(entry.token_manager_type) and info.implementation_type != code_of(
            entry.token_manager_type
        ):
            findings.add(
                ErrorKind.ON_CHAIN_MISMATCH,
                f"Token manager on chain {chain_id} has incorrect implementation type for token {token_id}: "
                f"expected '{entry.token_manager_type}', got '{name_of(info.implementation_type)}'",
                chain_id=chain_id,
            )
