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

from typing import Optional

__all__ = ['SudoTransferException', 'ConfigurationError', 'NodeConnectionError', 'KeyDerivationError',
           'SubmissionRejected', 'ExtrinsicTimeout', 'RuntimeExecutionError']


class SudoTransferException(Exception):
    pass


class ConfigurationError(SudoTransferException):
    pass


class NodeConnectionError(SudoTransferException, ConnectionError):
    pass


class KeyDerivationError(SudoTransferException):
    pass


class SubmissionRejected(SudoTransferException):
    """
    The node refused the extrinsic, either directly on submission (e.g. bad signature) or by reporting a terminal
    status other than inclusion (dropped, invalid, usurped, finality timeout)
    """
    def __init__(self, reason: str, status=None, extrinsic_hash: Optional[str] = None):
        self.reason = reason
        self.status = status
        self.extrinsic_hash = extrinsic_hash
        super().__init__(reason)


class ExtrinsicTimeout(SudoTransferException, TimeoutError):

    def __init__(self, timeout, extrinsic_hash: Optional[str] = None, last_status=None):
        self.timeout = timeout
        self.extrinsic_hash = extrinsic_hash
        self.last_status = last_status
        message = f'No inclusion within {timeout} seconds'
        if last_status is not None:
            message += f' (last status: {last_status.type})'
        super().__init__(message)


class RuntimeExecutionError(SudoTransferException):
    """
    Outcome of a sudo'd call that was included but failed during dispatch. This is reported, not raised.

    `section`, `name` and `docs` are set for module errors; generic dispatch errors only carry `name`
    """
    def __init__(self, name: str, section: Optional[str] = None, docs: Optional[list] = None):
        self.name = name
        self.section = section
        self.docs = docs or []
        super().__init__(str(self))

    @property
    def is_module(self) -> bool:
        return self.section is not None

    def __str__(self):
        if self.is_module:
            return f'{self.section}.{self.name}: {" ".join(self.docs)}'
        return self.name

    def __eq__(self, other):
        return isinstance(other, RuntimeExecutionError) and \
            (self.section, self.name, self.docs) == (other.section, other.name, other.docs)

    def __hash__(self):
        return hash((self.section, self.name, tuple(self.docs)))
