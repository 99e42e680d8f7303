"""
Step descriptors for migrations

A migration is a plain list of these steps. The sequencer interprets them
in order; nothing here talks to a network.
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from .contracts import ContractId


@dataclass(frozen=True)
class AddressOf:
    """Constructor argument standing in for a confirmed contract address"""
    contract: ContractId

    def __str__(self):
        return f"{self.contract}.address"


@dataclass(frozen=True)
class DeployLibrary:
    contract: ContractId

    def describe(self) -> str:
        return f"deploy library {self.contract}"


@dataclass(frozen=True)
class LinkLibrary:
    library: ContractId
    consumer: ContractId

    def describe(self) -> str:
        return f"link {self.library} into {self.consumer}"


@dataclass(frozen=True)
class DeployContract:
    contract: ContractId
    args: Tuple[Any, ...] = ()
    gas: Optional[int] = None

    def describe(self) -> str:
        text = f"deploy {self.contract}"
        if self.args:
            text += "(" + ", ".join(str(arg) for arg in self.args) + ")"
        if self.gas is not None:
            text += f" gas={self.gas}"
        return text


@dataclass(frozen=True)
class ResolveAddress:
    contract: ContractId

    def describe(self) -> str:
        return f"resolve {self.contract}.deployed()"


Step = Union[DeployLibrary, LinkLibrary, DeployContract, ResolveAddress]
