"""
Numbered migrations for the LuvNFT suite

Each migration is an ordered list of steps run once per network.
"""

from collections import OrderedDict
from typing import Dict, List

from .contracts import ContractId
from .steps import AddressOf, DeployContract, DeployLibrary, LinkLibrary, ResolveAddress, Step

LUV_NFT_GAS = 10_000_000

DEPLOY_LUV_NFT: List[Step] = [
    DeployLibrary(ContractId.ITERABLE_MAPPING),
    LinkLibrary(ContractId.ITERABLE_MAPPING, ContractId.LUV_NFT),
    DeployLibrary(ContractId.NFT_DESCRIPTOR),
    LinkLibrary(ContractId.NFT_DESCRIPTOR, ContractId.LUV_NFT),
    DeployContract(ContractId.LUV_NFT, gas=LUV_NFT_GAS),
    ResolveAddress(ContractId.LUV_NFT),
]

# LuvNFT must be confirmed before its address is handed to the auction
DEPLOY_NFT_AUCTION: List[Step] = [
    ResolveAddress(ContractId.LUV_NFT),
    DeployContract(ContractId.NFT_AUCTION, args=(AddressOf(ContractId.LUV_NFT),)),
    ResolveAddress(ContractId.NFT_AUCTION),
]

MIGRATIONS: Dict[str, List[Step]] = OrderedDict([
    ("2_deploy_luv_nft", DEPLOY_LUV_NFT),
    ("3_deploy_nft_auction", DEPLOY_NFT_AUCTION),
])


def resolve_migration(name: str) -> str:
    """Full migration name from its full name or numeric prefix"""
    if name in MIGRATIONS:
        return name
    for key in MIGRATIONS:
        if key.split("_", 1)[0] == name:
            return key
    raise KeyError(f"Unknown migration: {name}")


def migration_names() -> List[str]:
    return list(MIGRATIONS)
