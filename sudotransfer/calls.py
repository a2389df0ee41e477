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

from decimal import Decimal
from typing import Union, TYPE_CHECKING

from scalecodec.types import GenericCall
from substrateinterface.utils.ss58 import is_valid_ss58_address

from .utils.amount import parse_amount

if TYPE_CHECKING:
    from substrateinterface import SubstrateInterface

__all__ = ['SudoForceTransfer']


class SudoForceTransfer:
    """
    Description of `Sudo.sudo(Balances.force_transfer(source, dest, value))`. Instances are immutable and compare by
    value; composing the actual call requires the runtime metadata of a connected `SubstrateInterface`.
    """

    __slots__ = ('source', 'dest', 'amount')

    def __init__(self, source: str, dest: str, amount: Union[int, str, Decimal]):
        for name, address in [('source', source), ('dest', dest)]:
            if not isinstance(address, str) or not is_valid_ss58_address(address):
                raise ValueError(f'Invalid SS58 address for {name}: "{address}"')

        object.__setattr__(self, 'source', source)
        object.__setattr__(self, 'dest', dest)
        object.__setattr__(self, 'amount', parse_amount(amount))

    def __setattr__(self, key, value):
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    def __eq__(self, other):
        if not isinstance(other, SudoForceTransfer):
            return NotImplemented
        return (self.source, self.dest, self.amount) == (other.source, other.dest, other.amount)

    def __hash__(self):
        return hash((self.source, self.dest, self.amount))

    def __repr__(self):
        return f'<SudoForceTransfer(source={self.source}, dest={self.dest}, amount={self.amount})>'

    def call_params(self) -> dict:
        return {
            'source': self.source,
            'dest': self.dest,
            'value': self.amount
        }

    def compose(self, substrate: 'SubstrateInterface') -> GenericCall:
        """
        Composes the inner `Balances.force_transfer` call and wraps it in `Sudo.sudo`

        Parameters
        ----------
        substrate: SubstrateInterface

        Returns
        -------
        GenericCall
        """
        force_transfer_call = substrate.compose_call(
            call_module='Balances',
            call_function='force_transfer',
            call_params=self.call_params()
        )

        return substrate.compose_call(
            call_module='Sudo',
            call_function='sudo',
            call_params={
                'call': force_transfer_call
            }
        )
