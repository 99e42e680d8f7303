"""
Library linking for compiled bytecode

Supports both artifact flavours:
- Truffle: `__LibraryName______...` placeholders (40 chars, name cut to 36)
- Hardhat: `linkReferences` byte offsets pointing at `__$<hash>$__` placeholders
"""

import re
from typing import Dict, List, Optional

from ..errors import DeploymentError

PLACEHOLDER_LENGTH = 40
_PLACEHOLDER_RE = re.compile(r"__[A-Za-z0-9_$]{38}")


def truffle_placeholder(library_name: str) -> str:
    """Placeholder Truffle leaves in bytecode for an unlinked library"""
    return ("__" + library_name[:36]).ljust(PLACEHOLDER_LENGTH, "_")


def _strip_prefix(bytecode: str) -> str:
    return bytecode[2:] if bytecode.startswith("0x") else bytecode


def _address_hex(address: str) -> str:
    value = _strip_prefix(address).lower()
    if len(value) != 40 or not re.fullmatch(r"[0-9a-f]{40}", value):
        raise DeploymentError(f"Invalid library address: {address}")
    return value


def unlinked_libraries(bytecode: str) -> List[str]:
    """Names (or hashes) of the placeholders still present in bytecode"""
    found = []
    for match in _PLACEHOLDER_RE.finditer(_strip_prefix(bytecode)):
        name = match.group(0).strip("_").strip("$")
        if name not in found:
            found.append(name)
    return found


def link_bytecode(bytecode: str, library_name: str, address: str,
                  link_references: Optional[Dict[str, Dict[str, list]]] = None) -> str:
    """
    Substitute a deployed library address into bytecode

    Args:
        bytecode: Hex bytecode, with or without 0x prefix
        library_name: Contract name of the library
        address: Deployed library address
        link_references: Hardhat `linkReferences` section, if the artifact has one

    Returns:
        0x-prefixed bytecode with every reference to the library resolved
    """
    code = _strip_prefix(bytecode)
    target = _address_hex(address)

    offsets = []
    for libraries in (link_references or {}).values():
        for ref in libraries.get(library_name, []):
            offsets.append((ref["start"] * 2, ref.get("length", 20) * 2))

    if offsets:
        for start, length in offsets:
            if length != PLACEHOLDER_LENGTH:
                raise DeploymentError(f"Unexpected link reference length {length // 2} for {library_name}")
            code = code[:start] + target + code[start + length:]
        return "0x" + code

    placeholder = truffle_placeholder(library_name)
    if placeholder not in code:
        raise DeploymentError(f"Bytecode has no reference to library {library_name}")
    return "0x" + code.replace(placeholder, target)
