# TipHBAR - micro-tipping for creators on Hedera
# Copyright (C) 2024-2026 The TipHBAR Developers
#
# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

from typing import Any


class HederaMainnet(object):
    NAME = 'mainnet'
    MIRROR_NODE_URL = "https://mainnet.mirrornode.hedera.com/api/v1/"
    # Public Hedera networks keep every account in shard 0, realm 0.
    SHARD = 0
    REALM = 0
    EXPLORER_TRANSACTION_URL = "https://hashscan.io/mainnet/transaction/{}"


class HederaTestnet(object):
    NAME = 'testnet'
    MIRROR_NODE_URL = "https://testnet.mirrornode.hedera.com/api/v1/"
    SHARD = 0
    REALM = 0
    EXPLORER_TRANSACTION_URL = "https://hashscan.io/testnet/transaction/{}"


class HederaPreviewnet(object):
    NAME = 'previewnet'
    MIRROR_NODE_URL = "https://previewnet.mirrornode.hedera.com/api/v1/"
    SHARD = 0
    REALM = 0
    EXPLORER_TRANSACTION_URL = "https://hashscan.io/previewnet/transaction/{}"


NETWORKS_BY_NAME = {
    network.NAME: network for network in (HederaMainnet, HederaTestnet, HederaPreviewnet)
}


class _CurrentNetMeta(type):

    def __getattr__(cls, attr: str) -> Any:
        return getattr(cls._net, attr)


class Net(metaclass=_CurrentNetMeta):
    '''The current selected network.

    Use like so:

        from tiphbar.networks import Net, HederaTestnet
        Net.set_to(HederaTestnet)
    '''

    _net: type = HederaMainnet

    @classmethod
    def set_to(cls, net_class: type) -> None:
        cls._net = net_class

    @classmethod
    def set_to_name(cls, name: str) -> None:
        try:
            cls._net = NETWORKS_BY_NAME[name]
        except KeyError:
            raise ValueError(f"Unknown network '{name}'") from None

    @classmethod
    def is_mainnet(cls) -> bool:
        return cls._net is HederaMainnet
