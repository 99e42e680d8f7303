"""
Deployment Scripts
==================

Command line entry points for deploying the LuvNFT contracts.

Structure:
- migrate: Runs the numbered migrations against the configured network
"""

__version__ = "1.0.0"
__author__ = "LuvNFT Team"
