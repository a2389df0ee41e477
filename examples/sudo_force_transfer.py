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

from substrateinterface import Keypair

from sudotransfer import connect, SudoForceTransfer, SudoTransfer, SudoTransferException
from sudotransfer.constants import BOB, CHARLIE

# import logging
# logging.basicConfig(level=logging.DEBUG)

substrate = connect("ws://127.0.0.1:9944")

keypair = Keypair.create_from_uri('//Alice')

transfer = SudoForceTransfer(source=BOB, dest=CHARLIE, amount=1 * 10**15)

try:
    receipt = SudoTransfer(
        substrate, keypair, transfer,
        wait_for_finalization=True,
        timeout=60,
        era={'period': 64},
        status_handler=lambda status: print(f'Status: {status.type}')
    ).submit()

    print('Extrinsic "{}" finalized in block "{}"'.format(
        receipt.extrinsic_hash, receipt.block_hash
    ))

    if receipt.sudo_errors:
        for error in receipt.sudo_errors:
            print('⚠️ Sudo call failed: ', error)
    else:
        print('✅ Success, triggered events:')
        for event in receipt.triggered_events:
            print(f'* {event.value}')

except SudoTransferException as e:
    print("Failed to send: {}".format(e))

finally:
    substrate.close()
