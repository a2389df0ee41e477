# Sudo Transfer Client
#
# Copyright 2018-2023 Stichting Polkascan (Polkascan Foundation).
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import logging
import sys
from typing import Mapping, Optional

from .base import connect, ExtrinsicStatus, SudoTransfer, SudoTransferReceipt
from .calls import SudoForceTransfer
from .config import TransferConfig
from .constants import EXIT_SUCCESS, EXIT_FAILURE
from .exceptions import SudoTransferException, ConfigurationError
from .keyring import create_key_resolver, check_sudo_key
from .utils.amount import format_amount

__all__ = ['main', 'run', 'console_main']

logger = logging.getLogger(__name__)


def print_status(status: ExtrinsicStatus):
    print(f'Status of Sudo transfer: {status.type}')


def print_report(receipt: SudoTransferReceipt, token_decimals: int = 0):
    included_block_hash = receipt.block_hash

    for status in receipt.statuses:
        if status.is_in_block:
            included_block_hash = status.block_hash

    print(f'Successful Sudo transfer of {format_amount(receipt.amount, token_decimals)} '
          f'with hash {included_block_hash}')
    print(f'Included at block hash {included_block_hash}')

    if receipt.finalized:
        print(f'Finalized block hash {receipt.block_hash}')

    for error in receipt.sudo_errors:
        print(str(error))


def run(config: TransferConfig) -> int:
    """
    Connect, sign and submit the sudo force transfer described by `config` and print the outcome

    Returns
    -------
    int: exit code
    """
    substrate = connect(
        config.url, ss58_format=config.ss58_format, type_registry=config.type_registry, timeout=config.connect_timeout
    )

    try:
        keypair = create_key_resolver(config).resolve()
        logger.info(f'Signing with {keypair.ss58_address}')

        if config.verify_sudo_key:
            check_sudo_key(substrate, keypair)

        try:
            transfer = SudoForceTransfer(config.source, config.destination, config.amount)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        sudo_transfer = SudoTransfer(
            substrate, keypair, transfer,
            wait_for_finalization=config.wait_for_finalization,
            timeout=config.timeout,
            status_handler=print_status
        )

        receipt = sudo_transfer.submit()

        print_report(receipt, token_decimals=config.token_decimals)

    finally:
        substrate.close()

    return EXIT_SUCCESS


def main(environ: Optional[Mapping[str, str]] = None) -> int:
    try:
        config = TransferConfig.from_env(environ)
    except ConfigurationError as e:
        print(f'Invalid configuration: {e}', file=sys.stderr)
        return EXIT_FAILURE

    logging.basicConfig(level=config.log_level, stream=sys.stderr)

    try:
        return run(config)
    except SudoTransferException as e:
        logger.error(f'{e.__class__.__name__}: {e}')
    except Exception:
        logger.exception('Sudo transfer failed')

    return EXIT_FAILURE


def console_main():
    sys.exit(main())
