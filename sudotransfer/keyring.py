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
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from substrateinterface import Keypair
from substrateinterface.exceptions import StorageFunctionNotFound
from substrateinterface.utils.ss58 import ss58_decode

from .constants import DEFAULT_SUDO_URI, DEFAULT_SS58_FORMAT
from .exceptions import KeyDerivationError

if TYPE_CHECKING:
    from substrateinterface import SubstrateInterface
    from .config import TransferConfig

__all__ = ['KeyResolver', 'DevelopmentKeyResolver', 'MnemonicKeyResolver', 'create_key_resolver', 'check_sudo_key']

logger = logging.getLogger(__name__)


class KeyResolver(ABC):
    """
    Provides the keypair that signs the sudo extrinsic. Resolvers never access the chain.
    """

    def __init__(self, ss58_format: int = DEFAULT_SS58_FORMAT):
        self.ss58_format = ss58_format

    @abstractmethod
    def resolve(self) -> Keypair:
        pass


class DevelopmentKeyResolver(KeyResolver):
    """
    Publicly known development account, e.g. '//Alice' derived from the development phrase
    """

    def __init__(self, uri: str = DEFAULT_SUDO_URI, ss58_format: int = DEFAULT_SS58_FORMAT):
        super().__init__(ss58_format=ss58_format)
        self.uri = uri

    def resolve(self) -> Keypair:
        if not self.uri:
            raise KeyDerivationError('No development key URI provided')

        try:
            return Keypair.create_from_uri(self.uri, ss58_format=self.ss58_format)
        except (ValueError, NotImplementedError) as e:
            raise KeyDerivationError(f'Cannot derive keypair from URI "{self.uri}": {e}') from e


class MnemonicKeyResolver(KeyResolver):

    def __init__(self, mnemonic: str, ss58_format: int = DEFAULT_SS58_FORMAT):
        super().__init__(ss58_format=ss58_format)
        self.mnemonic = mnemonic

    def resolve(self) -> Keypair:
        if not self.mnemonic or not self.mnemonic.strip():
            raise KeyDerivationError('No mnemonic provided')

        # Derivation path, if any, follows the phrase: "<phrase>//hard/soft"
        phrase = self.mnemonic.split('/', 1)[0].strip()

        if not Keypair.validate_mnemonic(phrase):
            raise KeyDerivationError('Invalid mnemonic')

        try:
            return Keypair.create_from_uri(self.mnemonic.strip(), ss58_format=self.ss58_format)
        except (ValueError, NotImplementedError) as e:
            raise KeyDerivationError(f'Cannot derive keypair from mnemonic: {e}') from e


def create_key_resolver(config: 'TransferConfig') -> KeyResolver:
    if config.sudo_mnemonic:
        return MnemonicKeyResolver(config.sudo_mnemonic, ss58_format=config.ss58_format)
    return DevelopmentKeyResolver(config.sudo_uri, ss58_format=config.ss58_format)


def check_sudo_key(substrate: 'SubstrateInterface', keypair: Keypair) -> bool:
    """
    Compares the signing account with the account stored in `Sudo.Key`. A mismatch is only logged: the extrinsic
    will still be included, and the resulting `Sudo.RequireSudo` error is reported by the result interpreter.

    Parameters
    ----------
    substrate: SubstrateInterface
    keypair: signing Keypair

    Returns
    -------
    bool: True if the keypair is the current sudo key
    """
    try:
        sudo_key = substrate.query('Sudo', 'Key').value
    except StorageFunctionNotFound:
        logger.warning('Storage function "Sudo.Key" not found, chain might not have a Sudo pallet')
        return False

    if not sudo_key:
        logger.warning('No sudo key set on chain')
        return False

    if not sudo_key.startswith('0x'):
        sudo_key = ss58_decode(sudo_key)

    if sudo_key.replace('0x', '') != keypair.public_key.hex():
        logger.warning(f'Signing account {keypair.ss58_address} is not the sudo key of this chain')
        return False

    logger.debug(f'Signing account {keypair.ss58_address} is the sudo key')
    return True
