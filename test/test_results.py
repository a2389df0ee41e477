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

import unittest
from unittest.mock import MagicMock

from sudotransfer.exceptions import RuntimeExecutionError
from sudotransfer.results import find_sudo_results, decode_dispatch_error, find_module_error, interpret_events
from test import settings
from test.mocks import create_event, create_metadata


class ResultInterpreterTestCase(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.substrate = MagicMock()
        cls.substrate.metadata = create_metadata(
            pallets={0: 'System', 6: 'Balances', 9: 'Sudo'},
            errors={
                (6, 2): ('InsufficientBalance', ['Balance too low to send value.']),
                (9, 0): ('RequireSudo', ['Sender must be the Sudo account'])
            }
        )

    def test_find_sudo_results(self):
        events = [
            create_event(settings.EXTRINSIC_SUCCESS),
            create_event(settings.SUDID_OK),
            create_event({'module_id': 'Balances', 'event_id': 'Transfer', 'attributes': {'amount': 1}})
        ]
        self.assertEqual([{'Ok': ()}], find_sudo_results(events))

    def test_find_sudo_results_positional_attributes(self):
        events = [create_event({'module_id': 'Sudo', 'event_id': 'Sudid', 'attributes': ({'Err': 'BadOrigin'},)})]
        self.assertEqual([{'Err': 'BadOrigin'}], find_sudo_results(events))

    def test_find_sudo_results_bare_attributes(self):
        events = [{'module_id': 'Sudo', 'event_id': 'Sudid', 'attributes': {'Ok': None}}]
        self.assertEqual([{'Ok': None}], find_sudo_results(events))

    def test_success_has_no_errors(self):
        events = [create_event(settings.SUDID_OK), create_event(settings.EXTRINSIC_SUCCESS)]
        self.assertEqual([], interpret_events(self.substrate, events))

    def test_module_error(self):
        errors = interpret_events(self.substrate, [create_event(settings.SUDID_MODULE_ERROR)])

        self.assertEqual(1, len(errors))
        self.assertTrue(errors[0].is_module)
        self.assertEqual('Balances', errors[0].section)
        self.assertEqual('InsufficientBalance', errors[0].name)
        self.assertEqual('Balances.InsufficientBalance: Balance too low to send value.', str(errors[0]))

    def test_module_error_tuple_format(self):
        error = decode_dispatch_error(self.substrate, {'Module': (6, 2)})
        self.assertEqual(RuntimeExecutionError('InsufficientBalance', 'Balances', ['Balance too low to send value.']),
                         error)

    def test_module_error_legacy_index(self):
        error = decode_dispatch_error(self.substrate, {'Module': {'index': 6, 'error': 2}})
        self.assertEqual('InsufficientBalance', error.name)

    def test_multiline_docs_joined(self):
        substrate = MagicMock()
        substrate.metadata = create_metadata(
            pallets={6: 'Balances'}, errors={(6, 4): ('ExistentialDeposit', ['Value too low to create account', 'due to existential deposit'])}
        )
        self.assertEqual(
            'Balances.ExistentialDeposit: Value too low to create account due to existential deposit',
            str(find_module_error(substrate, 6, 4))
        )

    def test_unknown_module_error(self):
        error = find_module_error(self.substrate, 42, 1)
        self.assertFalse(error.is_module)
        self.assertEqual('Module(42, 1)', str(error))

    def test_generic_error(self):
        errors = interpret_events(self.substrate, [create_event(settings.SUDID_BAD_ORIGIN)])

        self.assertEqual(['BadOrigin'], [str(error) for error in errors])
        self.assertFalse(errors[0].is_module)
        self.assertIsNone(errors[0].section)

    def test_generic_error_with_value(self):
        self.assertEqual('Token(FundsUnavailable)', str(decode_dispatch_error(self.substrate, {'Token': 'FundsUnavailable'})))
        self.assertEqual('CannotLookup', str(decode_dispatch_error(self.substrate, {'CannotLookup': None})))

    def test_require_sudo_without_sudid(self):
        events = [create_event({
            'module_id': 'System', 'event_id': 'ExtrinsicFailed',
            'attributes': {
                'dispatch_error': {'Module': {'index': 9, 'error': '0x00000000'}},
                'dispatch_info': {'weight': {'ref_time': 0, 'proof_size': 0}, 'class': 'Normal', 'pays_fee': 'Yes'}
            }
        })]

        self.assertEqual(
            ['Sudo.RequireSudo: Sender must be the Sudo account'],
            [str(error) for error in interpret_events(self.substrate, events)]
        )

    def test_no_sudid_event(self):
        self.assertEqual([], interpret_events(self.substrate, [create_event(settings.EXTRINSIC_SUCCESS)]))

    def test_unexpected_result(self):
        with self.assertRaises(ValueError):
            interpret_events(self.substrate, [{'module_id': 'Sudo', 'event_id': 'Sudid', 'attributes': 'Unknown'}])


if __name__ == '__main__':
    unittest.main()
