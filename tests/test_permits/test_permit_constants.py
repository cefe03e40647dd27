"""
Permit Constants Test Suite

The type hashes and selectors must match the values hard-coded in the
deployed token and bridge contracts.

Usage:
    pytest tests/test_permits/test_permit_constants.py -v
"""

from zkevm_contracts.constants import (
    DAI_PERMIT_SELECTOR,
    DAI_PERMIT_TYPEHASH,
    EIP712_DOMAIN_NO_VERSION_TYPE,
    EIP712_DOMAIN_TYPEHASH,
    PERMIT_SELECTOR,
    PERMIT_TYPEHASH,
)
from zkevm_contracts.permits.standards import EIP712Domain


def test_permit_typehash():
    assert PERMIT_TYPEHASH.hex() == "6e71edae12b1b97f4d1f60370fef10105fa2faae0126114a169c64845d6126c9"


def test_dai_permit_typehash():
    assert DAI_PERMIT_TYPEHASH.hex() == "ea2aa0a1be11a07ed86d755c93467f4f82362b452371d1ba94d1715123511acb"


def test_domain_typehash():
    assert EIP712_DOMAIN_TYPEHASH.hex() == "8b73c3c69bb8fe3d512ecc4cf759cc79239f7b179b0ffacaa9a75d522b39400f"


def test_bridge_selectors():
    assert PERMIT_SELECTOR.hex() == "d505accf"
    assert DAI_PERMIT_SELECTOR.hex() == "8fcbaf0c"


def test_versionless_domain_type():
    domain = EIP712Domain(
        name="Token",
        chainId=1101,
        verifyingContract="0x2a3DD3EB832aF982ec71669E178424b10Dca2EDe",
    )
    encoded = "EIP712Domain(" + ",".join(f"{f['type']} {f['name']}" for f in domain.type_fields()) + ")"

    assert encoded == EIP712_DOMAIN_NO_VERSION_TYPE
