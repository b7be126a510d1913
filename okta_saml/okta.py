"""
Copyright 2016-present Nike, Inc.
Licensed under the Apache License, Version 2.0 (the "License");
You may not use this file except in compliance with the License.
You may obtain a copy of the License at
      http://www.apache.org/licenses/LICENSE-2.0
Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and* limitations under the License.*
"""
import time
from collections import namedtuple
from urllib.parse import urlparse

from . import duo, errors, transport
from .extract import decode_json, json_get, json_require, require_input_value
from .factors import MfaCapability, factor_label, is_supported, parse_factors

Credentials = namedtuple('Credentials', ['username', 'password', 'hostname'])


class OktaSamlClient(object):
    """
       The Okta SAML Client performs the Okta authentication API calls
       (and the Duo frame calls when Duo is the chosen factor) needed to
       trade a username and password for a SAML assertion.

       A client runs one authentication at a time. Every call to
       authenticate() starts a new requests.Session, so cookies never
       leak from one attempt into the next.
    """

    def __init__(self, login_ui, verify_ssl_certs=True, duo_poll_attempts=None, sleep=time.sleep,
                 on_duo_status=None):
        """
        :type login_ui: ui.UserInterface
        :param verify_ssl_certs: Enable/disable SSL verification
        :param duo_poll_attempts: Maximum number of Duo status checks, None for no limit
        :param sleep: callable used between Duo status checks
        :param on_duo_status: callable receiving Duo progress messages, defaults to login_ui.info
        """
        self.ui = login_ui
        self._verify_ssl_certs = verify_ssl_certs
        self._duo_poll_attempts = duo_poll_attempts
        self._sleep = sleep
        self._on_duo_status = on_duo_status
        self._http_client = None

    def authenticate(self, credentials):
        """ Log in to Okta and return the base64 SAMLResponse of the entry URL

        :type credentials: Credentials
        :rtype: str
        """
        self._http_client = transport.new_session(self._verify_ssl_certs)

        entry_url = 'https://{}'.format(credentials.hostname)
        org_host = urlparse(entry_url).netloc
        if not org_host:
            raise errors.RequestBuildError('building Okta URL', 'invalid hostname {!r}'.format(credentials.hostname))

        login_data = self._login_username_password(credentials, org_host)

        if login_data.get('status') == 'MFA_REQUIRED':
            state_token = json_require(login_data, 'stateToken', 'reading authentication response')
            factor = self._choose_factor(parse_factors(login_data))
            login_data = self._login_multi_factor(state_token, factor, org_host)

        session_token = self._get_session_token(login_data)
        return self.get_saml_response(org_host, entry_url, session_token)

    def _okta_post(self, url, stage, payload, headers=None):
        """ POST JSON to the Okta API and return the decoded answer """
        response = transport.send(
            self._http_client, 'POST', url, stage,
            raise_for_status=False,
            json=payload,
            headers=headers or transport.get_headers(),
        )
        response_data = decode_json(response, stage)
        if not isinstance(response_data, dict):
            raise errors.ProtocolError(stage, 'unexpected response body')

        # Okta error objects carry errorCode/errorSummary instead of a status
        # ref: https://developer.okta.com/docs/reference/error-codes/
        if 'errorCode' in response_data:
            raise errors.OktaApiError(stage, response_data.get('errorSummary'), response_data['errorCode'])

        return response_data

    def _login_username_password(self, credentials, org_host):
        """ login to Okta with a username and password"""
        login_json = {
            'username': credentials.username,
            'password': credentials.password
        }
        return self._okta_post(
            'https://{}/api/v1/authn'.format(org_host),
            'submitting credentials',
            login_json
        )

    def _choose_factor(self, factors):
        """ gets the list of available authentication factors and
        asks the user to select the one they want to use """
        if not factors:
            raise errors.ProtocolError('reading MFA factors', 'no factors offered')

        self.ui.info("Multi-factor Authentication required.")

        labels = [factor_label(factor) for factor in factors]
        if len(factors) == 1:
            self.ui.info("Using the only authentication factor configured: {}.".format(labels[0]))
            selection = 0
        else:
            selection = self.ui.choose('Select which MFA option to use', labels)

        # make sure the choice is valid
        if selection is None:
            raise errors.OktaSamlError("You made an invalid selection")

        factor = factors[selection]
        if not is_supported(factor):
            raise errors.UnsupportedMfaProviderError(factor.identifier)

        return factor

    def _login_multi_factor(self, state_token, factor, org_host):
        """ handle multi-factor authentication with Okta"""
        if not factor.id:
            raise errors.ProtocolError('reading MFA factors', 'missing field id')
        if not factor.verify_url:
            raise errors.ProtocolError('reading MFA factors', 'missing verify link for factor {}'.format(factor.id))

        if factor.capability is MfaCapability.DUO_PUSH:
            return self._login_duo_challenge(state_token, factor, org_host)
        elif factor.capability in (MfaCapability.SMS_OTP, MfaCapability.TOTP_OTP):
            return self._login_input_mfa_challenge(state_token, factor)

        raise errors.UnsupportedMfaProviderError(factor.identifier)

    def _verify(self, url, state_token, stage, pass_code=None, headers=None):
        """ POST to a factor verify link, the stateToken is always sent unchanged """
        verify_json = {'stateToken': state_token}
        if pass_code is not None:
            verify_json['passCode'] = pass_code
        return self._okta_post(url, stage, verify_json, headers)

    def _login_input_mfa_challenge(self, state_token, factor):
        """ Submit verification code for SMS or TOTP authentication methods"""
        # Okta sends the SMS on this first call; the answer holds nothing needed later
        self._verify(factor.verify_url, state_token, 'requesting verification challenge')

        pass_code = self.ui.input_required("Enter verification code", hidden=True).strip()
        return self._verify(factor.verify_url, state_token, 'submitting verification code', pass_code=pass_code)

    def _login_duo_challenge(self, state_token, factor, org_host):
        """ Duo MFA challenge """
        response_data = self._verify(factor.verify_url, state_token, 'requesting Duo verification')
        verification = json_get(response_data, '_embedded.factor._embedded.verification')
        if verification is None:
            raise errors.ProtocolError('reading Duo verification', 'missing field _embedded.factor._embedded.verification')
        challenge = duo.parse_challenge(verification)

        self.ui.info("Duo required; check your phone...")
        duo_client = duo.Duo(
            self.ui,
            self._http_client,
            challenge,
            on_status=self._on_duo_status,
            sleep=self._sleep,
            max_attempts=self._duo_poll_attempts,
        )
        auth = duo_client.trigger_duo('https://{}/signin/verify/duo/web'.format(org_host))

        self.mfa_callback(auth, challenge, factor, state_token)

        # the state token is now authenticated, asking again yields the session token
        headers = transport.get_headers()
        headers['X-Okta-XsrfToken'] = ''
        return self._verify(factor.verify_url, state_token, 'fetching session token', headers=headers)

    def mfa_callback(self, auth, challenge, factor, state_token):
        """Do callback to Okta with the info from the MFA provider
        Args:
            auth: String auth from MFA provider to send in the callback
            challenge: DuoChallenge holding the callback URL and app signature
            factor: MfaFactor being verified
            state_token: String Okta state token
        """
        callback_form = {
            'id': factor.id,
            'stateToken': state_token,
            'sig_response': duo.sig_response(auth, challenge),
        }
        transport.send(
            self._http_client, 'POST', challenge.callback_url, 'completing Duo callback',
            data=callback_form,
            headers=transport.get_form_headers(),
        )

    @staticmethod
    def _get_session_token(login_data):
        session_token = json_get(login_data, 'sessionToken')
        if session_token:
            return session_token

        status = login_data.get('status')
        if status == 'LOCKED_OUT':
            raise errors.OktaSamlLockedOut()
        elif status == 'MFA_ENROLL':
            raise errors.OktaSamlMFAEnrollStatus()

        raise errors.ProtocolError(
            'extracting session token',
            'missing field sessionToken (status {})'.format(status or 'unknown')
        )

    def get_saml_response(self, org_host, entry_url, session_token):
        """ trade the session token for the SAMLResponse of the entry URL"""
        stage = 'fetching SAML response'
        params = {
            'checkAccountSetupComplete': 'true',
            'token': session_token,
            'redirectUrl': entry_url,
        }
        response = transport.send(
            self._http_client, 'GET', 'https://{}/login/sessionCookieRedirect'.format(org_host), stage,
            params=params,
        )
        return require_input_value(response.text, 'SAMLResponse', stage)
