"""
Migration ledger (deployment.json)

Layout, keyed by network name:

    {
      "development": {
        "chainId": 1337,
        "roles": {"deployer": "0x..."},
        "contracts": {"IterableMapping": "0x...", "LuvNFT": "0x..."},
        "migrations": {"2_deploy_luv_nft": "2024-01-01T00:00:00"}
      }
    }
"""

import os
import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from .contracts import ContractId

logger = logging.getLogger(__name__)


class MigrationLedger:
    """Deployed addresses and completed migrations for one network"""

    def __init__(self, path: str, network: str):
        self.path = path
        self.network = network
        self.data: Dict[str, Any] = {}
        self._load()

    def _load(self):
        if not os.path.exists(self.path):
            logger.info(f"No ledger at {self.path}, starting fresh")
            return
        with open(self.path, 'r') as f:
            self.data = json.load(f)

    @property
    def _entry(self) -> Dict[str, Any]:
        entry = self.data.setdefault(self.network, {})
        entry.setdefault("contracts", {})
        entry.setdefault("migrations", {})
        entry.setdefault("roles", {})
        return entry

    def contracts(self) -> Dict[ContractId, str]:
        """Addresses recorded for this network"""
        known = {}
        for name, address in self._entry["contracts"].items():
            try:
                known[ContractId(name)] = address
            except ValueError:
                logger.warning(f"Ignoring unknown contract {name} in {self.path}")
        return known

    def is_complete(self, migration: str) -> bool:
        return migration in self._entry["migrations"]

    def record(self, migration: str, addresses: Dict[ContractId, str],
               chain_id: Optional[int] = None, deployer: Optional[str] = None):
        """Store a completed migration and the addresses it produced"""
        entry = self._entry
        for contract, address in addresses.items():
            entry["contracts"][str(contract)] = address
        entry["migrations"][migration] = datetime.now().isoformat(timespec="seconds")
        if chain_id is not None:
            entry["chainId"] = chain_id
        if deployer is not None:
            entry["roles"]["deployer"] = deployer
        self.save()

    def reset(self):
        """Forget completed migrations for this network"""
        self._entry["migrations"] = {}
        self.save()

    def save(self):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(self.data, f, indent=2, sort_keys=True)
        logger.info(f"Ledger written to {self.path}")
