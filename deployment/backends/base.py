"""
Deployment backend interface
"""

from dataclasses import dataclass
from typing import Any, Optional

from ..contracts import ContractId


@dataclass(frozen=True)
class DeploymentRecord:
    """On-chain result of deploying one contract"""
    contract: ContractId
    address: str
    transaction_hash: Optional[str] = None
    block_number: Optional[int] = None
    gas_used: Optional[int] = None


class DeploymentBackend:
    """
    Operations the sequencer needs from a deployment framework.

    Every call blocks until the framework has confirmed the operation.
    """

    def deploy(self, contract: ContractId, *args: Any, gas: Optional[int] = None) -> DeploymentRecord:
        raise NotImplementedError

    def link(self, library: ContractId, consumer: ContractId) -> None:
        raise NotImplementedError

    def deployed(self, contract: ContractId) -> DeploymentRecord:
        """Confirm that the contract's code is live at its recorded address"""
        raise NotImplementedError

    def address(self, contract: ContractId) -> str:
        raise NotImplementedError
