"""
ERC20 Permit Smart Contract ABI Module

Minimal ABI fragments for the read-only views needed to assemble a permit
request: ``name``, ``version``, ``nonces`` and ``DOMAIN_SEPARATOR``.
The ``permit`` call itself is never sent from here; its calldata is
produced by ``encoding.encode_permit_data``.

Usage:
    from ERC20_ABI import get_nonces_abi

    contract = w3.eth.contract(address=token_address, abi=get_nonces_abi())
    nonce = await contract.functions.nonces(owner).call()
"""

from typing import Dict, Any, List


def _view(name: str, inputs: List[Dict[str, str]], output_type: str) -> Dict[str, Any]:
    return {
        "name": name,
        "type": "function",
        "stateMutability": "view",
        "inputs": inputs,
        "outputs": [{"name": "", "type": output_type}],
    }


def get_nonces_abi() -> List[Dict[str, Any]]:
    """
    Get ABI for ``nonces(owner)``, the per-owner permit counter.

    Returns:
        List[Dict[str, Any]]: ABI for ``nonces``
    """
    return [_view("nonces", [{"name": "owner", "type": "address"}], "uint256")]


def get_metadata_abi() -> List[Dict[str, Any]]:
    """
    Get ABI for the ``name()`` and ``version()`` views used as EIP-712 domain fields.

    ``version()`` is not part of ERC-20; many permit tokens omit it.

    Returns:
        List[Dict[str, Any]]: ABI for ``name`` and ``version``
    """
    return [
        _view("name", [], "string"),
        _view("version", [], "string"),
    ]


def get_domain_separator_abi() -> List[Dict[str, Any]]:
    """
    Get ABI for the domain separator view.

    Both spellings are included: ``DOMAIN_SEPARATOR()`` (EIP-2612) and
    ``domainSeparator()`` (used by some older tokens).

    Returns:
        List[Dict[str, Any]]: ABI for both selectors
    """
    return [
        _view("DOMAIN_SEPARATOR", [], "bytes32"),
        _view("domainSeparator", [], "bytes32"),
    ]
