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
import time
from decimal import Decimal
from typing import Callable, List, Optional, Union

from websocket import WebSocketException, WebSocketTimeoutException

from scalecodec.types import GenericExtrinsic
from substrateinterface import SubstrateInterface, ExtrinsicReceipt, Keypair
from substrateinterface.exceptions import SubstrateRequestException

from .calls import SudoForceTransfer
from .constants import DEFAULT_SS58_FORMAT, DEFAULT_TYPE_REGISTRY, DEFAULT_TIMEOUT, DEFAULT_CONNECT_TIMEOUT
from .exceptions import NodeConnectionError, SubmissionRejected, ExtrinsicTimeout, RuntimeExecutionError
from .results import interpret_events

__all__ = ['connect', 'ExtrinsicStatus', 'ExtrinsicSubscription', 'SudoTransfer', 'SudoTransferReceipt', 'logger']

logger = logging.getLogger(__name__)


def connect(url: str, ss58_format: int = DEFAULT_SS58_FORMAT, type_registry: dict = None,
            timeout: Union[int, Decimal] = DEFAULT_CONNECT_TIMEOUT, **kwargs) -> SubstrateInterface:
    """
    Opens a websocket connection to the node at `url` and loads the runtime metadata, which is needed to compose
    calls and decode events.

    Parameters
    ----------
    url: websocket URL of the node, e.g. ws://127.0.0.1:9944
    ss58_format: address format of the chain
    type_registry: custom type registry, defaults to `DEFAULT_TYPE_REGISTRY`
    timeout: seconds to wait for the websocket handshake and for each reply, unless `ws_options` sets a timeout
    kwargs: other keyword arguments passed to `SubstrateInterface`

    Returns
    -------
    SubstrateInterface
    """
    if type_registry is None:
        type_registry = DEFAULT_TYPE_REGISTRY

    ws_options = dict(kwargs.pop('ws_options', None) or {})
    ws_options.setdefault('timeout', float(timeout))

    logger.debug(f'Connecting to {url} ...')

    substrate = None

    try:
        substrate = SubstrateInterface(
            url=url, ss58_format=ss58_format, type_registry=type_registry, ws_options=ws_options, **kwargs
        )
        substrate.init_runtime()
        logger.info(f'Connected to {substrate.chain} ({substrate.version})')
    except (WebSocketException, OSError, SubstrateRequestException) as e:
        if substrate is not None:
            substrate.close()
        raise NodeConnectionError(f'Cannot connect to {url}: {e}') from e

    return substrate


class ExtrinsicStatus:
    """
    A single notification of `author_submitAndWatchExtrinsic`, e.g. `"ready"` or `{"inBlock": "0x..."}`
    """

    # Status names are matched lowercase for backwards compatibility
    status_types = {
        'future': 'Future',
        'ready': 'Ready',
        'broadcast': 'Broadcast',
        'inblock': 'InBlock',
        'retracted': 'Retracted',
        'finalitytimeout': 'FinalityTimeout',
        'finalized': 'Finalized',
        'usurped': 'Usurped',
        'dropped': 'Dropped',
        'invalid': 'Invalid',
    }

    rejected_types = ('Dropped', 'Invalid', 'Usurped', 'FinalityTimeout')

    def __init__(self, result: Union[str, dict]):
        self.result = result
        self.data = None

        if type(result) is dict:
            key, self.data = list(result.items())[0]
        else:
            key = result

        self.type = self.status_types.get(str(key).lower(), str(key))

    @property
    def is_in_block(self) -> bool:
        return self.type == 'InBlock'

    @property
    def is_finalized(self) -> bool:
        return self.type == 'Finalized'

    @property
    def is_rejected(self) -> bool:
        return self.type in self.rejected_types

    @property
    def block_hash(self) -> Optional[str]:
        if self.type in ('InBlock', 'Retracted', 'Finalized', 'FinalityTimeout'):
            return self.data

    def __eq__(self, other):
        return isinstance(other, ExtrinsicStatus) and (self.type, self.data) == (other.type, other.data)

    def __str__(self):
        return self.type

    def __repr__(self):
        return f'<ExtrinsicStatus(type={self.type}, data={self.data})>'


class ExtrinsicSubscription:
    """
    Watch subscription of a submitted extrinsic; `unsubscribe()` only sends `author_unwatchExtrinsic` once
    """

    def __init__(self, substrate: SubstrateInterface, subscription_id: str):
        self.substrate = substrate
        self.subscription_id = subscription_id
        self.unsubscribed = False

    def unsubscribe(self) -> bool:
        if self.unsubscribed:
            return False

        self.unsubscribed = True
        logger.debug(f'Unwatching extrinsic subscription [{self.subscription_id}]')
        self.substrate.rpc_request('author_unwatchExtrinsic', [self.subscription_id])
        return True


class SudoTransferReceipt(ExtrinsicReceipt):
    """
    `ExtrinsicReceipt` of an included sudo force transfer, including the status updates received while waiting
    """

    def __init__(self, substrate: SubstrateInterface, extrinsic_hash: str = None, block_hash: str = None,
                 finalized: bool = None, amount: int = None, statuses: List[ExtrinsicStatus] = None):
        super().__init__(substrate=substrate, extrinsic_hash=extrinsic_hash, block_hash=block_hash,
                         finalized=finalized)
        self.amount = amount
        self.statuses = statuses or []
        self.__sudo_errors = None

    @property
    def sudo_errors(self) -> List[RuntimeExecutionError]:
        """
        Errors of the sudo'd call as reported by `Sudo.Sudid`, empty when the force transfer succeeded

        Returns
        -------
        list of RuntimeExecutionError
        """
        if self.__sudo_errors is None:
            self.__sudo_errors = interpret_events(self.substrate, self.triggered_events)
        return self.__sudo_errors


class SudoTransfer:

    def __init__(self, substrate: SubstrateInterface, keypair: Keypair, transfer: SudoForceTransfer,
                 wait_for_finalization: bool = False, timeout: Union[int, Decimal] = DEFAULT_TIMEOUT,
                 era: dict = None, status_handler: Callable[[ExtrinsicStatus], None] = None):
        """
        Signs and submits a sudo force transfer and follows its status until it is included in a block, or finalized
        when `wait_for_finalization` is set.

        Parameters
        ----------
        substrate: connected SubstrateInterface
        keypair: Keypair of the sudo account
        transfer: SudoForceTransfer to submit
        wait_for_finalization: only stop at a Finalized status instead of the first InBlock or Finalized status
        timeout: maximum seconds to wait, after which the subscription is cancelled
        era: mortality of the extrinsic, e.g. `{'period': 64}`; immortal when omitted
        status_handler: called with every intermediate ExtrinsicStatus
        """
        self.substrate = substrate
        self.keypair = keypair
        self.transfer = transfer
        self.wait_for_finalization = wait_for_finalization
        self.timeout = timeout
        self.era = era
        self.status_handler = status_handler

        self.extrinsic_hash = None
        self.subscription = None
        self.statuses = []

    @staticmethod
    def debug_message(message: str):
        logger.debug(message)

    def create_extrinsic(self) -> GenericExtrinsic:
        call = self.transfer.compose(self.substrate)
        return self.substrate.create_signed_extrinsic(call=call, keypair=self.keypair, era=self.era)

    def is_terminal(self, status: ExtrinsicStatus) -> bool:
        if self.wait_for_finalization:
            return status.is_finalized or status.is_rejected
        return status.is_in_block or status.is_finalized or status.is_rejected

    def submit(self) -> SudoTransferReceipt:
        """
        Submit the extrinsic and wait for the configured status. The watch subscription is cancelled on the first
        terminal status, so further notifications are never processed.

        Returns
        -------
        SudoTransferReceipt

        Raises
        ------
        SubmissionRejected: the node refused the extrinsic or dropped it
        ExtrinsicTimeout: no terminal status within `timeout` seconds
        """
        if self.extrinsic_hash is not None:
            raise ValueError("Extrinsic already submitted")

        extrinsic = self.create_extrinsic()
        extrinsic_hash = self.extrinsic_hash = '0x{}'.format(extrinsic.extrinsic_hash.hex())

        deadline = time.monotonic() + float(self.timeout)

        websocket = self.substrate.websocket
        previous_timeout = websocket.gettimeout() if websocket else None

        def restore_timeout():
            if websocket:
                websocket.settimeout(previous_timeout)

        def result_handler(message, update_nr, subscription_id):

            if self.subscription is None:
                self.subscription = ExtrinsicSubscription(self.substrate, subscription_id)

            if self.subscription.unsubscribed or 'params' not in message:
                return

            status = ExtrinsicStatus(message['params']['result'])
            self.statuses.append(status)

            self.debug_message(f'Extrinsic {extrinsic_hash} status #{update_nr}: {status.type}')

            if self.is_terminal(status):
                restore_timeout()
                self.subscription.unsubscribe()
                return {'status': status}

            if callable(self.status_handler):
                self.status_handler(status)

            remaining = deadline - time.monotonic()

            if remaining <= 0:
                restore_timeout()
                self.subscription.unsubscribe()
                return {'timeout': True, 'status': status}

            if websocket:
                websocket.settimeout(remaining)

        if websocket:
            websocket.settimeout(float(self.timeout))

        try:
            response = self.substrate.rpc_request(
                "author_submitAndWatchExtrinsic",
                [str(extrinsic.data)],
                result_handler=result_handler
            )
        except WebSocketTimeoutException:
            restore_timeout()
            self.cancel()
            raise ExtrinsicTimeout(
                self.timeout, extrinsic_hash=extrinsic_hash, last_status=self.statuses[-1] if self.statuses else None
            )
        except SubstrateRequestException as e:
            raise SubmissionRejected(f'Extrinsic rejected on submission: {e}', extrinsic_hash=extrinsic_hash) from e
        finally:
            restore_timeout()

        status = response['status']

        if response.get('timeout'):
            raise ExtrinsicTimeout(self.timeout, extrinsic_hash=extrinsic_hash, last_status=status)

        if status.is_rejected:
            raise SubmissionRejected(
                f'Extrinsic "{extrinsic_hash}" rejected with status "{status.type}"',
                status=status, extrinsic_hash=extrinsic_hash
            )

        return SudoTransferReceipt(
            substrate=self.substrate,
            extrinsic_hash=extrinsic_hash,
            block_hash=status.block_hash,
            finalized=status.is_finalized,
            amount=self.transfer.amount,
            statuses=self.statuses
        )

    def cancel(self):
        """
        Cancel the watch subscription. Before the first status update the subscription id is not known, so the
        websocket is closed instead, which ends the subscription on the node. Connection failures while unwatching are
        logged, the subscription ends with the connection anyway.
        """
        if self.subscription is None:
            if self.extrinsic_hash is not None and self.substrate.websocket:
                logger.info(f'Closing connection to end the watch subscription of extrinsic {self.extrinsic_hash}')
                self.substrate.websocket.close()
            return

        if self.subscription.unsubscribed:
            return

        try:
            self.subscription.unsubscribe()
        except (WebSocketException, SubstrateRequestException) as e:
            logger.warning(f'Failed to unwatch extrinsic subscription [{self.subscription.subscription_id}]: {e}')
