"""
Deployment backends
"""

from .base import DeploymentBackend, DeploymentRecord
from .web3_backend import Web3Backend

__all__ = ['DeploymentBackend', 'DeploymentRecord', 'Web3Backend']
