"""
Copyright 2018-present Krzysztof Nazarewski.
Licensed under the Apache License, Version 2.0 (the "License");
You may not use this file except in compliance with the License.
You may obtain a copy of the License at
      http://www.apache.org/licenses/LICENSE-2.0
Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and* limitations under the License.*
"""
import sys

from . import ui


class OktaSamlExitBase(Exception):
    def __init__(self, message, return_code, result=None):
        """
        :type message: str
        :type return_code: int
        :type result: str
        """
        super().__init__(message, return_code)
        self.message = message
        self.return_code = return_code
        self.result = result

    def __str__(self):
        return str(self.message)

    def handle(self):
        self.handle_message()
        self.handle_result()
        self.exit()

    def handle_message(self):
        if self.message:
            ui.default.info(self.message)

    def handle_result(self):
        if self.result is not None:
            ui.default.result(self.result)

    def exit(self):
        sys.exit(self.return_code)


class OktaSamlExitSuccess(OktaSamlExitBase):
    def __init__(self, message='', return_code=0, result=''):
        super().__init__(message, return_code, result)


class OktaSamlExitError(OktaSamlExitBase):
    def __init__(self, message='ERROR', return_code=1, output=''):
        super().__init__(message, return_code, output)


class OktaSamlExceptionBase(Exception):
    pass


class OktaSamlError(OktaSamlExceptionBase, OktaSamlExitError):
    pass


class StageError(OktaSamlError):
    """An error raised while running one step of the authentication flow.

    The step is kept in ``stage`` and, when the failure was triggered by
    another exception, that exception is chained as ``__cause__``.
    """

    def __init__(self, stage, reason=None, return_code=1):
        """
        :type stage: str
        :type reason: str
        """
        self.stage = stage
        self.reason = reason
        message = stage if not reason else '{}: {}'.format(stage, reason)
        super().__init__(message, return_code)


class TransportError(StageError):
    """The HTTP request could not be completed"""


class RequestBuildError(StageError):
    """The HTTP request could not be built"""


class ProtocolError(StageError):
    """A server response did not have the expected shape"""


class UnsupportedMfaProviderError(ProtocolError):
    def __init__(self, identifier):
        self.identifier = identifier
        super().__init__('unsupported mfa provider', identifier)


class DeviceAuthenticationError(StageError):
    """Duo reported FAILURE for the transaction"""


class DuoPollTimeout(StageError):
    """Duo did not reach a terminal result in the allowed number of polls"""


class OktaSamlMFAEnrollStatus(OktaSamlError):
    def __init__(self):
        super().__init__("You must enroll in MFA before using this tool.", 2)


class OktaSamlLockedOut(OktaSamlError):
    def __init__(self):
        super().__init__("Your Okta access has been locked out due to failed login attempts.", 2)


class OktaApiError(StageError):
    """Okta answered with an error object instead of a transaction state"""

    def __init__(self, stage, error_summary, error_code):
        self.error_code = error_code
        super().__init__(stage, "LOGIN ERROR: {} | Error Code: {}".format(error_summary, error_code), 2)
