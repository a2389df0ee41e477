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
#
#  amount.py

"""Balance amounts without floating point: everything ends up as an integer
   amount of base units (planck).
"""

from decimal import Decimal, InvalidOperation
from typing import Union

__all__ = ['parse_amount', 'format_amount']


def parse_amount(value: Union[int, str, Decimal], token_decimals: int = 0) -> int:
    """Converts `value` to an integer amount of base units.

    `value` is expressed in whole tokens and scaled by `10 ** token_decimals`;
    with the default of 0 it is already in base units. Floats are rejected
    because they cannot represent most balances exactly.
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(f"Amount must be an int, Decimal or numeric string, not {type(value).__name__}")

    if token_decimals < 0:
        raise ValueError("token_decimals cannot be negative")

    if isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, Decimal):
        amount = value
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip().replace('_', ''))
        except InvalidOperation:
            raise ValueError(f'Invalid amount "{value}"')
    else:
        raise TypeError(f"Amount must be an int, Decimal or numeric string, not {type(value).__name__}")

    if not amount.is_finite():
        raise ValueError(f'Invalid amount "{value}"')

    # Integer arithmetic only, Decimal operations would round to the context precision
    sign, digits, exponent = amount.as_tuple()
    coefficient = int(''.join(str(digit) for digit in digits) or '0')
    exponent += token_decimals

    if exponent >= 0:
        result = coefficient * 10 ** exponent
    else:
        result, remainder = divmod(coefficient, 10 ** -exponent)
        if remainder:
            raise ValueError(f'Amount {value} is not a whole number of base units')

    if sign and result != 0:
        raise ValueError(f'Amount cannot be negative: {value}')

    return result


def format_amount(value: int, token_decimals: int = 0) -> str:
    """Formats an amount of base units as whole tokens, without rounding.
    """
    if token_decimals == 0:
        return str(value)

    whole, fraction = divmod(value, 10 ** token_decimals)
    fraction = str(fraction).rjust(token_decimals, '0').rstrip('0')

    if fraction:
        return f'{whole}.{fraction}'
    return str(whole)
