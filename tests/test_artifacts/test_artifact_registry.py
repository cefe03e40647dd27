"""
Artifact Registry Test Suite

Covers loading compiled contract artifacts from disk and looking them up
by name.

Usage:
    pytest tests/test_artifacts/test_artifact_registry.py -v
"""

import json

import pytest
from web3 import Web3

from zkevm_contracts.artifacts import ArtifactRegistry, ContractArtifact, load_default_registry
from zkevm_contracts.constants import ZKEVM_CONTRACT_NAMES
from zkevm_contracts.exceptions import ArtifactLoadError, ArtifactNotFound, ConfigurationError

BRIDGE_ADDRESS = "0x2a3DD3EB832aF982ec71669E178424b10Dca2EDe"

PERMIT_ABI_ENTRY = {
    "type": "function",
    "name": "permit",
    "stateMutability": "nonpayable",
    "inputs": [
        {"name": "owner", "type": "address"},
        {"name": "spender", "type": "address"},
        {"name": "value", "type": "uint256"},
        {"name": "deadline", "type": "uint256"},
        {"name": "v", "type": "uint8"},
        {"name": "r", "type": "bytes32"},
        {"name": "s", "type": "bytes32"},
    ],
    "outputs": [],
}


def artifact_json(name, **extra):
    """Minimal Hardhat-style artifact payload."""
    data = {
        "_format": "hh-sol-artifact-1",
        "contractName": name,
        "sourceName": f"contracts/{name}.sol",
        "abi": [
            PERMIT_ABI_ENTRY,
            {"type": "event", "name": "Transfer", "inputs": [], "anonymous": False},
            {"type": "function", "name": "nonces", "stateMutability": "view",
             "inputs": [{"name": "owner", "type": "address"}],
             "outputs": [{"name": "", "type": "uint256"}]},
        ],
        "bytecode": "0x6080604052",
        "deployedBytecode": "0x6080",
        "linkReferences": {},
        "deployedLinkReferences": {},
    }
    data.update(extra)
    return data


@pytest.fixture
def artifacts_dir(tmp_path):
    """Directory holding an artifact for every known contract name."""
    for name in ZKEVM_CONTRACT_NAMES:
        (tmp_path / f"{name}.json").write_text(json.dumps(artifact_json(name)))
    return tmp_path


class TestContractArtifact:

    def test_parses_hardhat_keys(self):
        artifact = ContractArtifact.model_validate(artifact_json("TokenWrapped"))

        assert artifact.contract_name == "TokenWrapped"
        assert artifact.source_name == "contracts/TokenWrapped.sol"
        assert artifact.bytecode == "0x6080604052"
        assert artifact.deployed_bytecode == "0x6080"

    def test_function_lookup(self):
        artifact = ContractArtifact.model_validate(artifact_json("TokenWrapped"))

        assert artifact.function_names() == ["permit", "nonces"]
        assert artifact.get_function_abi("permit") == PERMIT_ABI_ENTRY
        assert artifact.get_function_abi("Transfer") is None

    def test_rejects_non_hex_bytecode(self):
        with pytest.raises(ValueError):
            ContractArtifact.model_validate(artifact_json("Verifier", bytecode="6080"))

    def test_unlinked_library_placeholder_loads(self):
        unlinked = "0x6080" + "73__$" + "ab" * 17 + "$__" + "6000"
        artifact = ContractArtifact.model_validate(artifact_json("PolygonZKEVM", bytecode=unlinked))

        assert artifact.bytecode == unlinked
        assert artifact.needs_linking is True
        assert ContractArtifact.model_validate(artifact_json("Verifier")).needs_linking is False

    def test_malformed_placeholder_rejected(self):
        with pytest.raises(ValueError):
            ContractArtifact.model_validate(artifact_json("PolygonZKEVM", bytecode="0x6080__$abc$__"))

    def test_bind_returns_contract(self):
        artifact = ContractArtifact.model_validate(artifact_json("PolygonZKEVMBridge"))
        contract = artifact.bind(Web3(), BRIDGE_ADDRESS.lower())

        assert contract.address == BRIDGE_ADDRESS
        assert hasattr(contract.functions, "permit")


class TestArtifactRegistry:

    def test_register_and_get(self):
        artifact = ContractArtifact.model_validate(artifact_json("Verifier"))
        registry = ArtifactRegistry([artifact])

        assert registry.get("Verifier") is artifact
        assert registry["Verifier"] is artifact
        assert "Verifier" in registry
        assert len(registry) == 1

    def test_unknown_name(self):
        registry = ArtifactRegistry()

        with pytest.raises(ArtifactNotFound) as exc_info:
            registry.get("PolygonZKEVM")
        assert exc_info.value.name == "PolygonZKEVM"
        assert "PolygonZKEVM" in str(exc_info.value)
        assert registry.find("PolygonZKEVM") is None

    def test_not_found_is_key_error(self):
        with pytest.raises(KeyError):
            ArtifactRegistry()["Missing"]

    def test_register_under_alias(self):
        artifact = ContractArtifact.model_validate(artifact_json("ERC20PermitMock"))
        registry = ArtifactRegistry()
        registry.register(artifact, name="PermitToken")

        assert registry.names() == ["PermitToken"]

    def test_from_directory_loads_known_contracts(self, artifacts_dir):
        registry = ArtifactRegistry.from_directory(artifacts_dir)

        assert registry.names() == sorted(ZKEVM_CONTRACT_NAMES)
        assert list(registry) == sorted(ZKEVM_CONTRACT_NAMES)
        assert registry.get("PolygonZKEVMBridge").contract_name == "PolygonZKEVMBridge"

    def test_missing_file_is_skipped(self, artifacts_dir):
        (artifacts_dir / "Verifier.json").unlink()
        registry = ArtifactRegistry.from_directory(artifacts_dir)

        assert "Verifier" not in registry
        assert len(registry) == len(ZKEVM_CONTRACT_NAMES) - 1

    def test_missing_file_strict(self, artifacts_dir):
        (artifacts_dir / "Verifier.json").unlink()
        with pytest.raises(ArtifactNotFound):
            ArtifactRegistry.from_directory(artifacts_dir, strict=True)

    def test_load_every_json(self, tmp_path):
        (tmp_path / "Custom.json").write_text(json.dumps({"abi": [], "bytecode": "0x"}))
        registry = ArtifactRegistry.from_directory(tmp_path, names=None)

        assert registry.names() == ["Custom"]
        assert registry.get("Custom").contract_name == "Custom"

    def test_malformed_json(self, tmp_path):
        (tmp_path / "TokenWrapped.json").write_text("{not json")
        with pytest.raises(ArtifactLoadError):
            ArtifactRegistry.from_directory(tmp_path, names=["TokenWrapped"])

    def test_missing_abi(self, tmp_path):
        (tmp_path / "TokenWrapped.json").write_text(json.dumps({"bytecode": "0x00"}))
        with pytest.raises(ArtifactLoadError):
            ArtifactRegistry.load_file(tmp_path / "TokenWrapped.json")

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ConfigurationError):
            ArtifactRegistry.from_directory(tmp_path / "nope")


class TestDefaultRegistry:

    def test_uses_env_directory(self, artifacts_dir, monkeypatch):
        monkeypatch.setenv("ZKEVM_ARTIFACTS_DIR", str(artifacts_dir))
        registry = load_default_registry()

        assert "TokenWrapped" in registry

    def test_env_not_set(self, monkeypatch):
        monkeypatch.delenv("ZKEVM_ARTIFACTS_DIR", raising=False)
        with pytest.raises(ConfigurationError):
            load_default_registry()
