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

from __future__ import annotations
import argparse
import asyncio
import json
import os
import sys
import time
from typing import Any, Sequence

import aiohttp

from .account_verifier import AccountVerifier
from .constants import AccountVerificationResult
from .logs import logs
from .networks import Net, NETWORKS_BY_NAME
from .simple_config import SimpleConfig
from .version import PACKAGE_VERSION


VERIFY_MESSAGES = {
    AccountVerificationResult.VERIFIED: "Account {} exists on {}",
    AccountVerificationResult.INVALID_FORMAT: "'{}' is not a valid account identifier for {}",
    AccountVerificationResult.NOT_FOUND: "Account {} does not exist on {}",
    AccountVerificationResult.NETWORK_ERROR: "Unable to check account {} on {}, try again later",
}


def add_global_options(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group('global options')
    group.add_argument("-v", "--verbose", action="store", dest="verbose",
                       const='info', default='warning', nargs='?',
                       choices = ('debug', 'info', 'warning', 'error'),
                       help="Set logging verbosity")
    group.add_argument("-D", "--dir", dest="tiphbar_path", help="TipHBAR directory")
    group.add_argument("--network", dest="network", default=None,
                       choices=sorted(NETWORKS_BY_NAME), help="Select the Hedera network")
    group.add_argument("--mirror-node-url", dest="mirror_node_url", default=None,
                       help="Use this mirror node REST API root instead of the network default")
    group.add_argument("--file-logging", action="store_true", dest="file_logging", default=False,
                       help="Redirect logging to log file")


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tiphbar",
        epilog="Run 'tiphbar <command> -h' to see the help for a command")
    parser.add_argument("--version", action="version", version=f"%(prog)s {PACKAGE_VERSION}")
    add_global_options(parser)
    subparsers = parser.add_subparsers(dest='cmd', metavar='<command>')
    parser_verify = subparsers.add_parser('verify-account',
        description="Check that an account exists on the selected network.",
        help="Check that an account exists")
    parser_verify.add_argument("account_id", help="account identifier, e.g. 0.0.1234567")
    subparsers.add_parser('show-config',
        description="Show the settings in effect after combining options and the config file.",
        help="Show effective settings")
    return parser


def get_config_options(argv: Sequence[str]|None=None) -> dict[str, Any]:
    parser = get_parser()
    args = parser.parse_args(argv)
    # config is an object passed to various constructors
    return { key: value for key, value in vars(args).items() if value is not None }


async def verify_account_async(config: SimpleConfig, account_id: str) \
        -> AccountVerificationResult:
    async with aiohttp.ClientSession() as session:
        verifier = AccountVerifier(session, config.get_mirror_node_url(),
            config.get_mirror_node_timeout())
        return await verifier.verify(account_id)


def get_effective_settings(config: SimpleConfig) -> dict[str, Any]:
    return {
        "data_path": config.path,
        "network": config.get_network_name(),
        "mirror_node_url": config.get_mirror_node_url(),
        "mirror_node_timeout": config.get_mirror_node_timeout(),
        "extension_timeout": config.get_extension_timeout(),
        "identity_service_timeout": config.get_identity_service_timeout(),
        "supabase_url": config.get_supabase_url(),
        "default_memo": config.get_default_memo(),
        "app_metadata": config.get_app_metadata()._asdict(),
    }


def main(argv: Sequence[str]|None=None) -> int:
    config_options = get_config_options(argv)
    logs.set_level(config_options['verbose'])

    config = SimpleConfig(config_options)
    Net.set_to_name(config.get_network_name())

    if config_options.get('file_logging'):
        log_path = os.path.join(config.path, "logs")
        os.makedirs(log_path, exist_ok=True)
        log_path = os.path.join(log_path, time.strftime("%Y%m%d-%H%M%S") + ".log")
        logs.add_file_output(log_path)

    cmd = config_options.get('cmd')
    if cmd == 'verify-account':
        account_id = config_options['account_id'].strip()
        result = asyncio.run(verify_account_async(config, account_id))
        print(VERIFY_MESSAGES[result].format(account_id, Net.NAME))
        return 0 if result == AccountVerificationResult.VERIFIED else 1
    elif cmd == 'show-config':
        print(json.dumps(get_effective_settings(config), indent=4))
        return 0

    get_parser().print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
