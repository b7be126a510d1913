#!/usr/bin/env python3
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
# local imports
from . import errors, ui
from .config import Config
from .okta import Credentials, OktaSamlClient


class OktaSamlLogin(object):
    """
       This is a CLI tool that logs in to Okta, answers the MFA
       challenge (SMS, TOTP or Duo) and writes the resulting
       base64 SAML assertion to stdout.

       Usage:
          -h, --help            show this help message and exit
          --hostname HOSTNAME, -H HOSTNAME
                                The Okta host to log in to, optionally followed
                                by the path of the SAML app.
          --username USERNAME, -u USERNAME
                                Okta username, asked for when not configured.
          --profile PROFILE, -p PROFILE
                                Profile of the config file to read.
          --insecure, -k        Skip TLS certificate verification.
          --duo-poll-attempts DUO_POLL_ATTEMPTS
                                Give up on a Duo push after this many status checks.
          --version             print the okta-saml version
    """

    def __init__(self, ui=ui.cli):
        """
        :type ui: ui.UserInterface
        """
        self.ui = ui
        self._config = None

    @property
    def config(self):
        if self._config is None:
            config = Config(login_ui=self.ui)
            config.get_args()
            config.apply_config_dict(config.get_config_dict())
            self._config = config
        return self._config

    def get_credentials(self):
        """ the password is only held in memory for this run """
        username = self.config.username
        if not username:
            username = self.ui.input_required('Username')

        password = self.config.password
        if not password:
            password = self.ui.input_required('Okta Password for {}'.format(username), hidden=True)

        return Credentials(username=username, password=password, hostname=self.config.hostname)

    def run(self):
        client = OktaSamlClient(
            self.ui,
            verify_ssl_certs=self.config.verify_ssl_certs,
            duo_poll_attempts=self.config.duo_poll_attempts,
        )
        saml_assertion = client.authenticate(self.get_credentials())
        self.ui.result(saml_assertion)
        return saml_assertion

    @classmethod
    def main(cls):
        try:
            cls().run()
        except errors.OktaSamlExitBase as exc:
            exc.handle()
        except KeyboardInterrupt:
            ui.default.error('Interrupted')
            errors.OktaSamlExitError('', 1).exit()


if __name__ == '__main__':
    OktaSamlLogin.main()
