"""
Contract Artifact Registry

A typed lookup table from contract name to ``ContractArtifact``.  It is
populated once at process start from the compiled build outputs and then
queried by name; unknown names raise ``ArtifactNotFound`` instead of
returning a missing attribute.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

from pydantic import ValidationError

from ..constants import ZKEVM_CONTRACT_NAMES, get_artifacts_dir_from_env
from ..exceptions import ArtifactLoadError, ArtifactNotFound, ConfigurationError
from .schemas import ContractArtifact

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ArtifactRegistry:
    """
    Registry of compiled contract artifacts keyed by contract name.

    Example:
        registry = ArtifactRegistry.from_directory("./compiled-contracts")
        bridge = registry.get("PolygonZKEVMBridge")
        bridge.abi, bridge.bytecode
    """

    def __init__(self, artifacts: Optional[Iterable[ContractArtifact]] = None):
        self._artifacts: Dict[str, ContractArtifact] = {}
        for artifact in artifacts or ():
            self.register(artifact)

    def register(self, artifact: ContractArtifact, *, name: Optional[str] = None) -> None:
        """
        Add ``artifact`` under ``name`` (defaults to its ``contract_name``).

        Re-registering a name replaces the previous artifact.
        """
        key = name or artifact.contract_name
        if key in self._artifacts:
            logger.debug("replacing artifact %s", key)
        self._artifacts[key] = artifact

    def get(self, name: str) -> ContractArtifact:
        """
        Look up an artifact by contract name.

        Raises:
            ArtifactNotFound: If nothing is registered under ``name``.
        """
        try:
            return self._artifacts[name]
        except KeyError:
            raise ArtifactNotFound(name) from None

    def find(self, name: str) -> Optional[ContractArtifact]:
        """Like ``get`` but returns None for unknown names."""
        return self._artifacts.get(name)

    def names(self) -> List[str]:
        """Registered contract names, sorted."""
        return sorted(self._artifacts)

    def __getitem__(self, name: str) -> ContractArtifact:
        return self.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._artifacts

    def __len__(self) -> int:
        return len(self._artifacts)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __repr__(self) -> str:
        return f"ArtifactRegistry(names={self.names()!r})"

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @staticmethod
    def load_file(path: PathLike) -> ContractArtifact:
        """
        Parse one Hardhat-style artifact JSON file.

        When the file has no ``contractName`` key the file stem is used.

        Raises:
            ArtifactNotFound: If the file does not exist.
            ArtifactLoadError: If the file is not a valid artifact.
        """
        path = Path(path)
        if not path.is_file():
            raise ArtifactNotFound(path.stem, f"Artifact file not found: {path}")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ArtifactLoadError(f"Could not read artifact {path}: {e}") from e

        if not isinstance(data, dict):
            raise ArtifactLoadError(f"Artifact {path} must contain a JSON object")
        data.setdefault("contractName", path.stem)

        try:
            return ContractArtifact.model_validate(data)
        except ValidationError as e:
            raise ArtifactLoadError(f"Invalid artifact {path}: {e}") from e

    @classmethod
    def from_directory(
        cls,
        directory: PathLike,
        names: Optional[Iterable[str]] = ZKEVM_CONTRACT_NAMES,
        *,
        strict: bool = False,
    ) -> "ArtifactRegistry":
        """
        Build a registry from ``<directory>/<Name>.json`` files.

        Args:
            directory: Folder holding the compiled artifacts.
            names:     Contract names to load.  ``None`` loads every
                       ``*.json`` file in the folder.
            strict:    Raise on a missing file instead of skipping it.

        Raises:
            ConfigurationError: If ``directory`` does not exist.
            ArtifactNotFound: If ``strict`` and a named file is missing.
            ArtifactLoadError: If a file is present but malformed.
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise ConfigurationError(f"Artifacts directory does not exist: {directory}")

        registry = cls()
        if names is None:
            for path in sorted(directory.glob("*.json")):
                registry.register(cls.load_file(path), name=path.stem)
            return registry

        for name in names:
            path = directory / f"{name}.json"
            if not path.is_file():
                if strict:
                    raise ArtifactNotFound(name, f"Artifact for {name!r} not found in {directory}")
                logger.warning("artifact %s not found in %s, skipping", name, directory)
                continue
            registry.register(cls.load_file(path), name=name)
        return registry


def load_default_registry(*, strict: bool = False) -> ArtifactRegistry:
    """
    Load the registry from the directory named by ``ZKEVM_ARTIFACTS_DIR``.

    Raises:
        ConfigurationError: If the variable is unset or the folder is missing.
    """
    directory = get_artifacts_dir_from_env()
    if directory is None:
        raise ConfigurationError("ZKEVM_ARTIFACTS_DIR is not set")
    return ArtifactRegistry.from_directory(directory, strict=strict)
