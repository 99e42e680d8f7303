#!/usr/bin/env python3
"""
Tests for the migration definitions and contract registry
"""

import pytest

from deployment.contracts import ContractId, ContractKind, descriptor
from deployment.migrations import (
    DEPLOY_LUV_NFT, DEPLOY_NFT_AUCTION, LUV_NFT_GAS, MIGRATIONS, migration_names, resolve_migration
)
from deployment.steps import AddressOf, DeployContract, DeployLibrary, LinkLibrary, ResolveAddress


class TestRegistry:
    """Test class for the contract registry"""

    def test_libraries(self):
        """Test which registry entries are libraries"""
        assert descriptor(ContractId.ITERABLE_MAPPING).is_library
        assert descriptor(ContractId.NFT_DESCRIPTOR).is_library
        assert not descriptor(ContractId.LUV_NFT).is_library
        assert descriptor(ContractId.NFT_AUCTION).kind is ContractKind.CONTRACT

    def test_luv_nft_links(self):
        """Test the libraries LuvNFT declares"""
        assert descriptor(ContractId.LUV_NFT).libraries == (
            ContractId.ITERABLE_MAPPING, ContractId.NFT_DESCRIPTOR
        )
        assert descriptor(ContractId.NFT_AUCTION).libraries == ()

    def test_lookup_by_name(self):
        """Test descriptor lookup by artifact name"""
        assert descriptor("LuvNFT").id is ContractId.LUV_NFT
        with pytest.raises(ValueError):
            descriptor("Migrations")

    def test_str_is_artifact_name(self):
        """Test that contract ids format as artifact names"""
        assert str(ContractId.NFT_AUCTION) == "NFTAuction"
        assert f"{ContractId.LUV_NFT}" == "LuvNFT"


class TestMigrations:
    """Test class for the migration definitions"""

    def test_order(self):
        """Test migration order"""
        assert migration_names() == ["2_deploy_luv_nft", "3_deploy_nft_auction"]
        assert MIGRATIONS["2_deploy_luv_nft"] is DEPLOY_LUV_NFT

    def test_luv_nft_steps(self):
        """Test the LuvNFT migration step list"""
        assert DEPLOY_LUV_NFT == [
            DeployLibrary(ContractId.ITERABLE_MAPPING),
            LinkLibrary(ContractId.ITERABLE_MAPPING, ContractId.LUV_NFT),
            DeployLibrary(ContractId.NFT_DESCRIPTOR),
            LinkLibrary(ContractId.NFT_DESCRIPTOR, ContractId.LUV_NFT),
            DeployContract(ContractId.LUV_NFT, gas=10000000),
            ResolveAddress(ContractId.LUV_NFT),
        ]
        assert LUV_NFT_GAS == 10000000

    def test_auction_confirms_luv_nft_first(self):
        """Test that the auction migration confirms LuvNFT first"""
        assert DEPLOY_NFT_AUCTION[0] == ResolveAddress(ContractId.LUV_NFT)
        assert DEPLOY_NFT_AUCTION[1].args == (AddressOf(ContractId.LUV_NFT),)

    def test_resolve_by_prefix(self):
        """Test lookup by full name and numeric prefix"""
        assert resolve_migration("3") == "3_deploy_nft_auction"
        assert resolve_migration("2_deploy_luv_nft") == "2_deploy_luv_nft"
        with pytest.raises(KeyError):
            resolve_migration("4")


class TestStepDescriptions:
    """Test class for step descriptions"""

    def test_describe(self):
        """Test step descriptions used in logs and errors"""
        assert DeployLibrary(ContractId.ITERABLE_MAPPING).describe() == "deploy library IterableMapping"
        assert LinkLibrary(ContractId.NFT_DESCRIPTOR, ContractId.LUV_NFT).describe() == \
            "link NFTDescriptor into LuvNFT"
        assert DeployContract(ContractId.LUV_NFT, gas=LUV_NFT_GAS).describe() == "deploy LuvNFT gas=10000000"
        assert DeployContract(ContractId.NFT_AUCTION, args=(AddressOf(ContractId.LUV_NFT),)).describe() == \
            "deploy NFTAuction(LuvNFT.address)"
        assert ResolveAddress(ContractId.LUV_NFT).describe() == "resolve LuvNFT.deployed()"


if __name__ == "__main__":
    pytest.main([__file__])
