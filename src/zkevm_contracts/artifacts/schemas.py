"""
Contract Artifact Schema

``ContractArtifact`` is the typed descriptor of one compiled contract: its
ABI and its deployment bytecode, as emitted by Hardhat
(``{"contractName", "sourceName", "abi", "bytecode", "deployedBytecode", ...}``).
Unknown keys in the JSON (``_format``, ``linkReferences``, ...) are ignored.
"""

import re
from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field, field_validator
from web3 import AsyncWeb3, Web3

from ..schemas.bases import CanonicalModel


# Unlinked library reference in solc >= 0.5 output: __$<34 hex chars>$__
LINK_PLACEHOLDER = re.compile(r"__\$[0-9a-fA-F]{34}\$__")


def _check_hex(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    if not isinstance(value, str) or not value.startswith("0x"):
        raise ValueError("bytecode must be a 0x-prefixed hex string")
    try:
        bytes.fromhex(LINK_PLACEHOLDER.sub("00" * 20, value[2:]))
    except ValueError:
        raise ValueError("bytecode is not valid hexadecimal")
    return value


class ContractArtifact(CanonicalModel):
    """
    Compiled contract descriptor.

    Attributes:
        contract_name: Contract name (alias ``contractName``).
        source_name: Solidity source path (alias ``sourceName``), optional.
        abi: Interface description, the list of ABI entries.
        bytecode: Deployment (creation) bytecode, 0x-prefixed hex.  Unlinked
            library placeholders (``__$...$__``) are kept as emitted.
        deployed_bytecode: Runtime bytecode (alias ``deployedBytecode``), optional.

    Example::

        artifact = ContractArtifact.model_validate(json.loads(path.read_text()))
        bridge = artifact.bind(w3, "0x2a3DD3EB832aF982ec71669E178424b10Dca2EDe")
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    contract_name: str = Field(..., alias="contractName", description="Contract name")
    source_name: Optional[str] = Field(default=None, alias="sourceName", description="Solidity source path")
    abi: List[Dict[str, Any]] = Field(..., description="Contract ABI")
    bytecode: str = Field(..., description="Creation bytecode (0x-prefixed hex)")
    deployed_bytecode: Optional[str] = Field(default=None, alias="deployedBytecode", description="Runtime bytecode")

    @field_validator("bytecode", "deployed_bytecode")
    @classmethod
    def _validate_bytecode(cls, value: Optional[str]) -> Optional[str]:
        return _check_hex(value)

    @property
    def needs_linking(self) -> bool:
        """True if the creation bytecode still holds library placeholders."""
        return LINK_PLACEHOLDER.search(self.bytecode) is not None

    def function_names(self) -> List[str]:
        """Names of the ``function`` entries of the ABI, in declaration order."""
        return [entry["name"] for entry in self.abi if entry.get("type") == "function"]

    def get_function_abi(self, name: str) -> Optional[Dict[str, Any]]:
        """
        Return the first ABI ``function`` entry named ``name``, or None.
        """
        for entry in self.abi:
            if entry.get("type") == "function" and entry.get("name") == name:
                return entry
        return None

    def bind(self, w3: AsyncWeb3 | Web3, address: str):
        """
        Return a web3 contract object for a deployed instance of this artifact.

        Args:
            w3:      ``Web3`` or ``AsyncWeb3`` instance.
            address: Deployed contract address.
        """
        return w3.eth.contract(address=w3.to_checksum_address(address), abi=self.abi)
