# Pytest looks here for fixtures
import pytest

from tiphbar.networks import HederaMainnet, Net


@pytest.fixture
def set_to_mainnet_network_on_test_finish():
    try:
        yield
    finally:
        if not Net.is_mainnet():
            Net.set_to(HederaMainnet)
