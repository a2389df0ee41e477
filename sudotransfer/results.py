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
from typing import List, Optional, TYPE_CHECKING

from .exceptions import RuntimeExecutionError

if TYPE_CHECKING:
    from substrateinterface import SubstrateInterface

__all__ = ['find_sudo_results', 'decode_dispatch_error', 'find_module_error', 'interpret_events']

logger = logging.getLogger(__name__)


def _event_value(event) -> dict:
    return event.value if hasattr(event, 'value') else event


def find_sudo_results(events: list) -> list:
    """
    Returns the `sudo_result` of every `Sudo.Sudid` event in `events`
    """
    results = []

    for event in events:
        event_value = _event_value(event)

        if event_value['module_id'] != 'Sudo' or event_value['event_id'] != 'Sudid':
            continue

        attributes = event_value['attributes']

        if type(attributes) is dict and 'sudo_result' in attributes:
            results.append(attributes['sudo_result'])
        elif type(attributes) in (list, tuple):
            # Backwards compatibility
            results.append(attributes[0])
        else:
            results.append(attributes)

    return results


def find_module_error(substrate: 'SubstrateInterface', module_index: int, error_index: int) -> RuntimeExecutionError:
    """
    Resolves a module error to the pallet name, error name and documentation using the loaded runtime metadata. No
    RPC requests are performed.

    Parameters
    ----------
    substrate: SubstrateInterface with initialized runtime
    module_index: index of the pallet
    error_index: index of the error variant

    Returns
    -------
    RuntimeExecutionError
    """
    section = None

    for pallet in substrate.metadata.pallets:
        if pallet.value['index'] == module_index:
            section = pallet.name
            break

    module_error = substrate.metadata.get_module_error(module_index=module_index, error_index=error_index)

    if section is None or module_error is None:
        logger.warning(f'Module error {module_index}-{error_index} not found in metadata')
        return RuntimeExecutionError(name=f'Module({module_index}, {error_index})')

    return RuntimeExecutionError(section=section, name=module_error.name, docs=list(module_error.docs or []))


def decode_dispatch_error(substrate: 'SubstrateInterface', dispatch_error) -> RuntimeExecutionError:
    """
    Decodes a `DispatchError` value, e.g. `{'Module': {'index': 5, 'error': '0x02000000'}}` or `'BadOrigin'`

    Module errors are resolved with `find_module_error()`, all other errors keep their generic string form
    """
    if type(dispatch_error) is dict and 'Module' in dispatch_error:

        if type(dispatch_error['Module']) is tuple:
            module_index = dispatch_error['Module'][0]
            error_index = dispatch_error['Module'][1]
        else:
            module_index = dispatch_error['Module']['index']
            error_index = dispatch_error['Module']['error']

        if type(error_index) is str:
            # Actual error index is first u8 in new [u8; 4] format
            error_index = int(error_index[2:4], 16)

        return find_module_error(substrate, module_index, error_index)

    if type(dispatch_error) is dict and len(dispatch_error) == 1:
        name, value = list(dispatch_error.items())[0]

        if value is None or value == ():
            return RuntimeExecutionError(name=name)

        return RuntimeExecutionError(name=f'{name}({value})')

    return RuntimeExecutionError(name=str(dispatch_error))


def interpret_events(substrate: 'SubstrateInterface', events: list) -> List[RuntimeExecutionError]:
    """
    Inspects the events triggered by a sudo extrinsic and returns the errors of every failed `Sudo.Sudid` result. An
    empty list means the sudo'd call was dispatched successfully.

    When no `Sudid` event is present the sudo call itself was rejected by the runtime (e.g. `Sudo.RequireSudo`); the
    dispatch error of `System.ExtrinsicFailed` is returned instead.

    Parameters
    ----------
    substrate: SubstrateInterface
    events: triggered events of the extrinsic

    Returns
    -------
    list of RuntimeExecutionError
    """
    errors = []

    sudo_results = find_sudo_results(events)

    for sudo_result in sudo_results:
        error = _result_error(sudo_result)
        if error is not None:
            errors.append(decode_dispatch_error(substrate, error))

    if not sudo_results:
        failed = _extrinsic_failed_error(events)
        if failed is not None:
            errors.append(decode_dispatch_error(substrate, failed))
        else:
            logger.warning('No "Sudo.Sudid" event found in triggered events')

    return errors


def _result_error(result) -> Optional[object]:
    if type(result) is dict:
        if 'Err' in result:
            return result['Err']
        if 'Ok' in result:
            return None
    raise ValueError(f'Unexpected sudo_result format: {result}')


def _extrinsic_failed_error(events: list) -> Optional[object]:
    for event in events:
        event_value = _event_value(event)

        if event_value['module_id'] == 'System' and event_value['event_id'] == 'ExtrinsicFailed':
            if type(event_value['attributes']) is dict:
                return event_value['attributes']['dispatch_error']
            # Backwards compatibility
            return event_value['attributes'][0]
