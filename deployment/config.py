"""
Environment configuration for migrations
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class Config:
    rpc_url: str = "http://localhost:8545"
    private_key: Optional[str] = None
    chain_id: Optional[int] = None
    network: str = "development"
    build_dir: str = "build/contracts"
    deployment_file: str = "deployment.json"
    tx_timeout: int = 120
    poa: bool = False
    slack_webhook: Optional[str] = None
    log_file: str = "migrations.log"

    @classmethod
    def from_env(cls) -> "Config":
        """Build configuration from environment variables"""
        return cls(
            rpc_url=os.getenv("RPC_URL", "http://localhost:8545"),
            private_key=os.getenv("PRIVATE_KEY"),
            chain_id=int(os.environ["CHAIN_ID"]) if os.getenv("CHAIN_ID") else None,
            network=os.getenv("NETWORK", "development"),
            build_dir=os.getenv("BUILD_DIR", "build/contracts"),
            deployment_file=os.getenv("DEPLOYMENT_FILE", "deployment.json"),
            tx_timeout=int(os.getenv("TX_TIMEOUT", "120")),
            poa=os.getenv("POA", "false").strip().lower() in TRUE_VALUES,
            slack_webhook=os.getenv("SLACK_WEBHOOK") or None,
            log_file=os.getenv("LOG_FILE", "migrations.log"),
        )
