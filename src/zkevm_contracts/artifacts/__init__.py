"""Lookup of compiled smart-contract artifacts by contract name."""
from .schemas import ContractArtifact
from .registry import ArtifactRegistry, load_default_registry

__all__ = ["ContractArtifact", "ArtifactRegistry", "load_default_registry"]
