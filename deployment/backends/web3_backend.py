"""
Web3 deployment backend
Deploys compiled Truffle/Hardhat artifacts with a local signing key
"""

import os
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from web3 import Web3
from web3.middleware import ExtraDataToPOAMiddleware

from ..contracts import ContractId
from ..errors import DeploymentError
from .base import DeploymentBackend, DeploymentRecord
from .linker import link_bytecode, unlinked_libraries

logger = logging.getLogger(__name__)


@dataclass
class Artifact:
    """Compiled contract loaded from the build directory"""
    name: str
    abi: List[Dict[str, Any]]
    bytecode: str
    link_references: Optional[Dict[str, Dict[str, list]]] = None
    path: Optional[str] = None


def artifact_paths(build_dir: str, name: str) -> List[str]:
    """Candidate artifact locations, Truffle layout first then Hardhat"""
    return [
        os.path.join(build_dir, f"{name}.json"),
        os.path.join(build_dir, f"{name}.sol", f"{name}.json"),
        os.path.join(build_dir, "contracts", f"{name}.sol", f"{name}.json"),
    ]


def load_artifact(build_dir: str, contract: ContractId) -> Artifact:
    """Loads a contract ABI and bytecode from its JSON artifact."""
    name = str(contract)
    for path in artifact_paths(build_dir, name):
        if not os.path.exists(path):
            continue
        with open(path, 'r') as f:
            data = json.load(f)
        bytecode = data.get('bytecode')
        # some toolchains nest bytecode as {"object": "..."}
        if isinstance(bytecode, dict):
            bytecode = bytecode.get('object')
        if not bytecode or bytecode == "0x":
            raise DeploymentError(f"Artifact {path} has no bytecode (abstract contract or interface?)")
        return Artifact(
            name=name,
            abi=data['abi'],
            bytecode=bytecode if bytecode.startswith("0x") else "0x" + bytecode,
            link_references=data.get('linkReferences') or None,
            path=path,
        )
    raise DeploymentError(f"No artifact for {name} under {build_dir}. Compile the contracts first.")


class Web3Backend(DeploymentBackend):
    """Deployment backend that signs and sends transactions through web3.py"""

    def __init__(self, w3: Web3, private_key: str, build_dir: str,
                 chain_id: Optional[int] = None, tx_timeout: int = 120,
                 known: Optional[Dict[ContractId, str]] = None):
        if not private_key:
            raise DeploymentError("PRIVATE_KEY not found in environment")

        self.w3 = w3
        self.private_key = private_key
        self.build_dir = build_dir
        self.chain_id = chain_id
        self.tx_timeout = tx_timeout
        self.account = self.w3.eth.account.from_key(private_key)

        self._artifacts: Dict[ContractId, Artifact] = {}
        # bytecode with the links applied so far, per consumer
        self._pending: Dict[ContractId, str] = {}
        self._records: Dict[ContractId, DeploymentRecord] = {}

        for contract, address in (known or {}).items():
            contract = ContractId(contract)
            self._records[contract] = DeploymentRecord(contract, self.w3.to_checksum_address(address))

        logger.info(f"Using deployer account: {self.account.address}")

    @classmethod
    def from_config(cls, config, known: Optional[Dict[ContractId, str]] = None) -> "Web3Backend":
        """Connect to the configured RPC endpoint"""
        w3 = Web3(Web3.HTTPProvider(config.rpc_url))
        if config.poa:
            w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        if not w3.is_connected():
            raise DeploymentError(f"Could not connect to RPC URL: {config.rpc_url}")
        logger.info(f"Connected to blockchain at {config.rpc_url}")

        return cls(
            w3,
            config.private_key,
            config.build_dir,
            chain_id=config.chain_id,
            tx_timeout=config.tx_timeout,
            known=known,
        )

    def _artifact(self, contract: ContractId) -> Artifact:
        if contract not in self._artifacts:
            self._artifacts[contract] = load_artifact(self.build_dir, contract)
        return self._artifacts[contract]

    def _bytecode(self, contract: ContractId) -> str:
        if contract not in self._pending:
            self._pending[contract] = self._artifact(contract).bytecode
        return self._pending[contract]

    def link(self, library: ContractId, consumer: ContractId) -> None:
        library_address = self.address(library)
        artifact = self._artifact(consumer)
        self._pending[consumer] = link_bytecode(
            self._bytecode(consumer),
            str(library),
            library_address,
            artifact.link_references,
        )
        logger.debug(f"{consumer} bytecode now references {library} at {library_address}")

    def deploy(self, contract: ContractId, *args: Any, gas: Optional[int] = None) -> DeploymentRecord:
        artifact = self._artifact(contract)
        bytecode = self._bytecode(contract)

        unresolved = unlinked_libraries(bytecode)
        if unresolved:
            raise DeploymentError(f"{contract} has unlinked libraries: {', '.join(unresolved)}")

        factory = self.w3.eth.contract(abi=artifact.abi, bytecode=bytecode)
        if self.chain_id is None:
            # sign for whatever network the node serves
            self.chain_id = self.w3.eth.chain_id

        tx_params: Dict[str, Any] = {
            'from': self.account.address,
            'nonce': self.w3.eth.get_transaction_count(self.account.address),
            'gasPrice': self.w3.eth.gas_price,
            'chainId': self.chain_id,
        }
        if gas is not None:
            tx_params['gas'] = gas

        # build_transaction estimates gas when none is given
        tx = factory.constructor(*args).build_transaction(tx_params)

        signed_tx = self.w3.eth.account.sign_transaction(tx, self.private_key)
        tx_hash = Web3.to_hex(self.w3.eth.send_raw_transaction(signed_tx.raw_transaction))
        logger.info(f"{contract} deployment sent: {tx_hash}")

        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.tx_timeout)
        if receipt['status'] != 1:
            raise DeploymentError(f"{contract} deployment reverted: {tx_hash}")
        if not receipt.get('contractAddress'):
            raise DeploymentError(f"{contract} deployment receipt has no contract address: {tx_hash}")

        record = DeploymentRecord(
            contract=contract,
            address=receipt['contractAddress'],
            transaction_hash=tx_hash,
            block_number=receipt['blockNumber'],
            gas_used=receipt['gasUsed'],
        )
        # linked bytecode stays pending so a redeploy keeps its links
        self._records[contract] = record
        return record

    def deployed(self, contract: ContractId) -> DeploymentRecord:
        record = self._records.get(contract)
        if record is None:
            raise DeploymentError(f"{contract} has not been deployed")

        code = self.w3.eth.get_code(record.address)
        if not code:
            raise DeploymentError(f"No code at {record.address} for {contract}")
        return record

    def address(self, contract: ContractId) -> str:
        record = self._records.get(contract)
        if record is None:
            raise DeploymentError(f"{contract} has not been deployed")
        return record.address
