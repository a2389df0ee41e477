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
import os
from decimal import Decimal, InvalidOperation
from typing import Optional, Union, Mapping

from .constants import *
from .exceptions import ConfigurationError
from .utils.amount import parse_amount

__all__ = ['TransferConfig', 'WaitFor']


class WaitFor:
    INCLUSION = 'inclusion'
    FINALIZATION = 'finalization'

    choices = (INCLUSION, FINALIZATION)


class TransferConfig:

    def __init__(self, network: str = DEFAULT_NETWORK, url: str = None, wait_for: str = WaitFor.INCLUSION,
                 timeout: Union[int, Decimal] = DEFAULT_TIMEOUT,
                 connect_timeout: Union[int, Decimal] = DEFAULT_CONNECT_TIMEOUT, sudo_uri: str = DEFAULT_SUDO_URI,
                 sudo_mnemonic: str = None, source: str = DEFAULT_SOURCE, destination: str = DEFAULT_DESTINATION,
                 amount: Union[int, str, Decimal] = DEFAULT_AMOUNT, token_decimals: int = 0,
                 ss58_format: int = DEFAULT_SS58_FORMAT, type_registry: dict = None, verify_sudo_key: bool = True,
                 log_level: str = 'WARNING'):
        """
        Settings for a single sudo force transfer

        Parameters
        ----------
        network: name of the endpoint preset: 'development', 'testnet' or 'mainnet'
        url: explicit websocket URL, takes precedence over `network`
        wait_for: 'inclusion' stops at the first InBlock or Finalized status, 'finalization' only at Finalized
        timeout: maximum number of seconds to wait for the extrinsic to reach `wait_for`
        connect_timeout: maximum number of seconds to wait for the websocket handshake and each reply while connecting
        sudo_uri: suri of the well-known signing account, used when no `sudo_mnemonic` is set
        sudo_mnemonic: secret phrase (optionally followed by a derivation path) of the sudo account
        source: SS58 address the balance is taken from
        destination: SS58 address the balance is credited to
        amount: int, Decimal or numeric string; whole tokens when `token_decimals` is set, otherwise base units
        token_decimals: number of decimals used to scale `amount` to base units
        ss58_format: address format used for the signing keypair
        type_registry: custom type registry passed to the SubstrateInterface
        verify_sudo_key: compare the signing account with the on-chain `Sudo.Key`
        log_level: name of the logging level
        """

        if url is None:
            if network not in NETWORK_PRESETS:
                raise ConfigurationError(
                    f'Unknown network "{network}", choose from: {", ".join(NETWORK_PRESETS)}'
                )
            url = NETWORK_PRESETS[network]

        if url[0:6] != 'wss://' and url[0:5] != 'ws://':
            raise ConfigurationError(f'Subscriptions require a websocket (ws:// or wss://) URL, got "{url}"')

        if wait_for not in WaitFor.choices:
            raise ConfigurationError(f'Unknown wait_for "{wait_for}", choose from: {", ".join(WaitFor.choices)}')

        for name, value in [('timeout', timeout), ('connect_timeout', connect_timeout)]:
            if isinstance(value, float) or isinstance(value, bool):
                raise ConfigurationError(f'{name} must be an int or Decimal')

            if isinstance(value, Decimal) and not value.is_finite():
                raise ConfigurationError(f'{name} must be a finite number')

            if value <= 0:
                raise ConfigurationError(f'{name} must be greater than 0')

        try:
            self.amount = parse_amount(amount, token_decimals=token_decimals)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(str(e)) from e

        if logging.getLevelName(log_level.upper()) not in (
                logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL):
            raise ConfigurationError(f'Unknown log level "{log_level}"')

        self.network = network
        self.url = url
        self.wait_for = wait_for
        self.timeout = timeout
        self.connect_timeout = connect_timeout
        self.sudo_uri = sudo_uri
        self.sudo_mnemonic = sudo_mnemonic
        self.source = source
        self.destination = destination
        self.token_decimals = token_decimals
        self.ss58_format = ss58_format
        self.type_registry = type_registry if type_registry is not None else DEFAULT_TYPE_REGISTRY
        self.verify_sudo_key = verify_sudo_key
        self.log_level = log_level.upper()

    @property
    def wait_for_finalization(self) -> bool:
        return self.wait_for == WaitFor.FINALIZATION

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, prefix: str = ENV_PREFIX) -> 'TransferConfig':
        """
        Create a `TransferConfig` from environment variables, e.g. `SUDO_TRANSFER_NETWORK=testnet`. Variables that are
        not set fall back to the defaults of the constructor.

        Parameters
        ----------
        environ: mapping to read from, defaults to `os.environ`
        prefix: prefix of the variable names

        Returns
        -------
        TransferConfig
        """
        if environ is None:
            environ = os.environ

        def get(name):
            value = environ.get(prefix + name)
            if value is not None and value.strip() != '':
                return value.strip()

        kwargs = {}

        for name, key in [
            ('NETWORK', 'network'), ('URL', 'url'), ('WAIT_FOR', 'wait_for'), ('SUDO_URI', 'sudo_uri'),
            ('SUDO_MNEMONIC', 'sudo_mnemonic'), ('SOURCE', 'source'), ('DESTINATION', 'destination'),
            ('AMOUNT', 'amount'), ('LOG_LEVEL', 'log_level')
        ]:
            value = get(name)
            if value is not None:
                kwargs[key] = value

        if 'wait_for' in kwargs:
            kwargs['wait_for'] = kwargs['wait_for'].lower()

        if 'network' in kwargs:
            kwargs['network'] = kwargs['network'].lower()

        for name, key in [('TIMEOUT', 'timeout'), ('CONNECT_TIMEOUT', 'connect_timeout')]:
            if get(name) is not None:
                try:
                    kwargs[key] = Decimal(get(name))
                except InvalidOperation:
                    raise ConfigurationError(f'Invalid {prefix}{name} "{get(name)}", number of seconds expected')

        for name, key in [('SS58_FORMAT', 'ss58_format'), ('TOKEN_DECIMALS', 'token_decimals')]:
            if get(name) is not None:
                try:
                    kwargs[key] = int(get(name))
                except ValueError:
                    raise ConfigurationError(f'Invalid {prefix}{name} "{get(name)}", integer expected')

        if get('VERIFY_SUDO_KEY') is not None:
            value = get('VERIFY_SUDO_KEY').lower()
            if value in ('1', 'true', 'yes', 'on'):
                kwargs['verify_sudo_key'] = True
            elif value in ('0', 'false', 'no', 'off'):
                kwargs['verify_sudo_key'] = False
            else:
                raise ConfigurationError(f'Invalid {prefix}VERIFY_SUDO_KEY "{value}", boolean expected')

        return cls(**kwargs)
