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
# Copyright 2018 Nathan V
# https://github.com/nathan-v/aws_okta_keyman
"""All the Duo things."""

import time
from collections import namedtuple

from . import errors, transport
from .extract import decode_json, json_get, json_require, require_input_value

DuoChallenge = namedtuple('DuoChallenge', ['host', 'tx_signature', 'app_signature', 'callback_url'])

# Fixed placeholder values, not read from a real browser.
BROWSER_FINGERPRINT = (
    ('java_version', ''),
    ('flash_version', ''),
    ('screen_resolution_width', '3008'),
    ('screen_resolution_height', '1692'),
    ('color_depth', '24'),
)


def split_signature(signature):
    """Split Okta's 'TX:APP' Duo signature into (tx, app)

    Args:
        signature: String signature from the Okta verification object

    Returns:
        Tuple of transaction signature and application signature
    """
    parts = (signature or '').split(':')
    if len(parts) < 2:
        raise errors.ProtocolError('reading Duo verification', 'malformed signature')
    return parts[0], parts[1]


def parse_challenge(verification):
    """Build a DuoChallenge from _embedded.factor._embedded.verification"""
    stage = 'reading Duo verification'
    tx_signature, app_signature = split_signature(json_require(verification, 'signature', stage))
    return DuoChallenge(
        host=json_require(verification, 'host', stage),
        tx_signature=tx_signature,
        app_signature=app_signature,
        callback_url=json_require(verification, '_links.complete.href', stage),
    )


def sig_response(cookie, challenge):
    """Value Okta expects back in the completion callback: '<duo cookie>:<app signature>'"""
    return "{}:{}".format(cookie, challenge.app_signature)


class Duo:
    """Drives the Duo frame protocol for an Okta 'DUO WEB' factor.

    One instance handles one challenge. It shares the caller's
    requests.Session so Duo's cookies stay in the attempt's jar.
    """

    POLL_INTERVAL = 3
    FACTORS = ['Passcode', 'Duo Push']

    def __init__(self, login_ui, session, challenge, on_status=None, sleep=time.sleep, max_attempts=None):
        """
        :type login_ui: ui.UserInterface
        :param session: requests.Session of the running authentication attempt
        :param challenge: DuoChallenge parsed from the Okta verify response
        :param on_status: callable receiving Duo's progress messages, defaults to login_ui.info
        :param sleep: callable used to wait between status polls
        :param max_attempts: upper bound on status requests, None polls until Duo answers
        """
        self.ui = login_ui
        self.session = session
        self.challenge = challenge
        self.on_status = on_status or login_ui.info
        self.sleep = sleep
        self.max_attempts = max_attempts

    def _url(self, path):
        return "https://{}{}".format(self.challenge.host, path)

    def _post(self, path, data, stage, **kwargs):
        return transport.send(
            self.session, 'POST', self._url(path), stage,
            data=data,
            headers=transport.get_form_headers(),
            **kwargs
        )

    def trigger_duo(self, parent_url):
        """Run the whole Duo exchange and return the cookie for the Okta callback

        Args:
            parent_url: URL of the Okta page that would host the Duo iframe
        """
        sid = self.do_auth(parent_url)
        factor, passcode = self.choose_factor()
        transaction_id = self.get_txid(sid, factor, passcode)
        return self.poll_status(sid, transaction_id)

    def do_auth(self, parent_url):
        """Open a Duo session

        Returns:
            String Duo session ID
        """
        data = [('parent', parent_url)]
        data.extend(BROWSER_FINGERPRINT)

        ret = self._post('/frame/web/v1/auth', data, 'starting Duo session',
                         params={'tx': self.challenge.tx_signature})
        return require_input_value(ret.text, 'sid', 'starting Duo session', unescape=True)

    def choose_factor(self):
        """Ask which Duo factor to use, and the passcode when it is 'Passcode'"""
        selection = self.ui.choose('Select a DUO MFA Option', self.FACTORS)
        if selection is None:
            raise errors.OktaSamlError('You made an invalid selection')

        factor = self.FACTORS[selection]
        passcode = None
        if factor == 'Passcode':
            passcode = self.ui.input_required('Enter passcode')
        return factor, passcode

    def get_txid(self, sid, factor, passcode=None):
        """Get Duo transaction ID

        Args:
            sid: String Duo session ID
            factor: String to tell Duo which factor to use
            passcode: OTP passcode string

        Returns:
            String Duo transaction ID
        """
        stage = 'requesting Duo {}'.format(factor)
        data = {
            'sid': sid,
            'device': 'phone1',
            'factor': factor,
            'out_of_date': 'false',
        }
        if passcode:
            data['passcode'] = passcode

        result = decode_json(self._post('/frame/prompt', data, stage), stage)
        if json_get(result, 'stat') != 'OK':
            raise errors.ProtocolError(stage, 'Duo answered stat={}'.format(json_get(result, 'stat')))
        return json_require(result, 'response.txid', stage)

    def get_status(self, sid, transaction_id):
        """Ask Duo once how the transaction is going

        Returns:
            Tuple of (result, cookie); cookie is only set once result is SUCCESS
        """
        stage = 'checking Duo status'
        result = decode_json(self._post('/frame/status', {'sid': sid, 'txid': transaction_id}, stage), stage)

        status = json_get(result, 'response.status')
        if status:
            self.on_status(status)

        return json_get(result, 'response.result'), json_get(result, 'response.cookie')

    def poll_status(self, sid, transaction_id):
        """Poll /frame/status until Duo reports SUCCESS or FAILURE

        The same sid/txid pair is sent on every request.

        Returns:
            String cookie to use in the Okta callback
        """
        attempts = 0
        try:
            while True:
                attempts += 1
                result, cookie = self.get_status(sid, transaction_id)
                if result == 'SUCCESS':
                    if not cookie:
                        raise errors.ProtocolError('checking Duo status', 'missing field response.cookie')
                    return cookie
                if result == 'FAILURE':
                    raise errors.DeviceAuthenticationError('failed to authenticate device')
                if self.max_attempts is not None and attempts >= self.max_attempts:
                    raise errors.DuoPollTimeout(
                        'waiting for Duo', 'no answer after {} status checks'.format(attempts))
                self.sleep(self.POLL_INTERVAL)
        except KeyboardInterrupt:
            self.ui.warning("User canceled waiting for MFA success.")
            raise
