"""
LuvNFT Deployment
=================

Ordered deployment ("migration") tooling for the LuvNFT contract suite.

Structure:
- contracts: Contract identifiers and deployment descriptors
- steps: Deploy / link / resolve step descriptors
- sequencer: Sequential, fail-fast step execution
- migrations: The numbered migrations
- backends/: Deployment backends (web3)
- ledger: deployment.json bookkeeping
- notifier: Slack alerts
"""

__version__ = "1.0.0"
__author__ = "LuvNFT Team"
