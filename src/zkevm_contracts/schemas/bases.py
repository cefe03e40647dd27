"""
Base Schema Models

Defines the base class that every pydantic model of the package inherits
from. It fixes the serialization behaviour shared by permit requests, permit
signatures and contract artifacts.

Core Classes:
    - CanonicalModel: Pydantic base model with deterministic JSON output

Dependencies:
    - pydantic: For data validation and serialization
"""

import json
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class CanonicalModel(BaseModel):
    """
    Pydantic base model with canonical JSON serialization.

    Fields may be populated either by their Python name or by their alias
    (the camelCase names used by the contracts' tooling, e.g. ``chainId``).

    Example:
        class MyModel(CanonicalModel):
            name: str
            value: int

        model = MyModel(name="test", value=123)
        model.to_canonical_json()  # '{"name":"test","value":123}'
    """

    model_config = ConfigDict(populate_by_name=True)

    def to_canonical_json(self) -> str:
        """
        Convert model to a deterministic JSON string.

        Keys are sorted and whitespace is removed so that two equal models
        always serialize to the same bytes.

        Returns:
            str: Compact JSON with sorted keys.
        """
        data = self.model_dump(mode="json")
        return json.dumps(
            data,
            separators=(",", ":"),
            sort_keys=True,
            ensure_ascii=False
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert model to dictionary representation.

        Returns:
            Dict[str, Any]: Dictionary with all model fields.
        """
        return self.model_dump()
