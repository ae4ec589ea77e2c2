"""Unit tests for x402_exact.core.networks."""

import pytest

from x402_exact.core.errors import UnsupportedNetworkError
from x402_exact.core.networks import (
    EVM_NETWORKS,
    KNOWN_NETWORKS,
    SVM_NETWORKS,
    NetworkFamily,
    chain_id,
    default_asset,
    is_evm_network,
    is_svm_network,
    network_family,
)


class TestNetworkPredicates:
    """Test the EVM/SVM membership predicates."""

    @pytest.mark.parametrize("network", KNOWN_NETWORKS)
    def test_exactly_one_family_matches(self, network):
        assert is_evm_network(network) != is_svm_network(network)

    def test_sets_are_disjoint(self):
        assert not set(EVM_NETWORKS) & set(SVM_NETWORKS)

    @pytest.mark.parametrize("value", ["unknown-chain", "", "BASE", None, 8453, ["base"]])
    def test_unknown_values_are_in_neither_set(self, value):
        assert is_evm_network(value) is False
        assert is_svm_network(value) is False

    def test_family_lookup(self):
        assert network_family("base") is NetworkFamily.EVM
        assert network_family("solana") is NetworkFamily.SVM

    def test_family_lookup_rejects_unknown(self):
        with pytest.raises(UnsupportedNetworkError) as excinfo:
            network_family("solana-mainnet-beta")
        assert excinfo.value.network == "solana-mainnet-beta"


class TestNetworkMetadata:
    def test_chain_ids(self):
        assert chain_id("base") == 8453
        assert chain_id("base-sepolia") == 84532

    def test_chain_id_only_for_evm(self):
        with pytest.raises(UnsupportedNetworkError):
            chain_id("solana")

    @pytest.mark.parametrize("network", EVM_NETWORKS)
    def test_every_evm_network_has_an_eip712_asset(self, network):
        asset = default_asset(network)
        assert asset is not None
        assert asset.decimals == 6
        assert set(asset.eip712) == {"name", "version"}

    @pytest.mark.parametrize("network", SVM_NETWORKS)
    def test_svm_assets_have_no_eip712_domain(self, network):
        asset = default_asset(network)
        assert asset is not None
        assert asset.eip712 is None

    def test_unknown_network_has_no_asset(self):
        assert default_asset("unknown-chain") is None
