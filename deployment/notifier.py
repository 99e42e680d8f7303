"""
Slack alerts for migration runs
"""

import logging
from typing import Dict, Optional

import requests

from .contracts import ContractId

logger = logging.getLogger(__name__)


class Notifier:
    def __init__(self, slack_webhook: Optional[str] = None):
        self.slack_webhook = slack_webhook

    def migration_succeeded(self, migration: str, network: str, addresses: Dict[ContractId, str]):
        fields = [
            {"title": str(contract), "value": address, "short": False}
            for contract, address in addresses.items()
        ]
        self._send_slack_alert(f"Migration {migration} completed on {network}", fields)

    def migration_failed(self, migration: str, network: str, error: Exception):
        fields = [{"title": "Error", "value": str(error), "short": False}]
        self._send_slack_alert(f"🚨 Migration {migration} failed on {network}", fields)

    def _send_slack_alert(self, text: str, fields):
        """Send Slack alert"""
        if not self.slack_webhook:
            return

        payload = {
            "text": text,
            "attachments": [{"fields": fields}],
        }
        try:
            response = requests.post(self.slack_webhook, json=payload, timeout=10)
            response.raise_for_status()
            logger.info("Slack alert sent successfully")
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to send Slack alert: {e}")
