"""
Contract registry for the LuvNFT suite
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class ContractId(str, Enum):
    """Compiled contracts this repository knows how to deploy"""
    ITERABLE_MAPPING = "IterableMapping"
    NFT_DESCRIPTOR = "NFTDescriptor"
    LUV_NFT = "LuvNFT"
    NFT_AUCTION = "NFTAuction"

    def __str__(self):
        return self.value


class ContractKind(str, Enum):
    LIBRARY = "library"
    CONTRACT = "contract"


@dataclass(frozen=True)
class ContractDescriptor:
    """Deployment descriptor for a single contract"""
    id: ContractId
    kind: ContractKind
    libraries: Tuple[ContractId, ...] = ()

    @property
    def is_library(self) -> bool:
        return self.kind is ContractKind.LIBRARY


REGISTRY: Dict[ContractId, ContractDescriptor] = {
    ContractId.ITERABLE_MAPPING: ContractDescriptor(ContractId.ITERABLE_MAPPING, ContractKind.LIBRARY),
    ContractId.NFT_DESCRIPTOR: ContractDescriptor(ContractId.NFT_DESCRIPTOR, ContractKind.LIBRARY),
    ContractId.LUV_NFT: ContractDescriptor(
        ContractId.LUV_NFT,
        ContractKind.CONTRACT,
        libraries=(ContractId.ITERABLE_MAPPING, ContractId.NFT_DESCRIPTOR),
    ),
    ContractId.NFT_AUCTION: ContractDescriptor(ContractId.NFT_AUCTION, ContractKind.CONTRACT),
}


def descriptor(contract: ContractId) -> ContractDescriptor:
    """Look up the descriptor for a contract id"""
    return REGISTRY[ContractId(contract)]
