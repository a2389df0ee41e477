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

NETWORK_DEVELOPMENT = 'development'
NETWORK_TESTNET = 'testnet'
NETWORK_MAINNET = 'mainnet'

NETWORK_PRESETS = {
    NETWORK_DEVELOPMENT: 'ws://127.0.0.1:9944',
    NETWORK_TESTNET: 'ws://testnet-harbour.datahighway.com',
    NETWORK_MAINNET: 'ws://westlake.datahighway.com',
}

DEFAULT_NETWORK = NETWORK_DEVELOPMENT

# Target chain still encodes System.Account with dual ref counts
DEFAULT_TYPE_REGISTRY = {
    'types': {
        'AccountInfo': 'AccountInfoWithDualRefCount'
    }
}

DEFAULT_SS58_FORMAT = 42

# Well-known development accounts (subkey inspect //Alice etc.)
ALICE = '5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY'
BOB = '5FHneW46xGXgs5mUiveU4sbTyGBzmstUspZC92UhjJM694ty'
CHARLIE = '5FLSigC9HGRKVhB9FiEo4Y3koPsNmBmLJbpXg2mp1hXcS59Y'

DEFAULT_SUDO_URI = '//Alice'
DEFAULT_SOURCE = BOB
DEFAULT_DESTINATION = CHARLIE
DEFAULT_AMOUNT = 1

DEFAULT_TIMEOUT = 120
DEFAULT_CONNECT_TIMEOUT = 30

ENV_PREFIX = 'SUDO_TRANSFER_'

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
