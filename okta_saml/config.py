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
import argparse
import configparser
import os

from . import errors, version

ENV_SETTINGS = {
    'OKTA_HOSTNAME': 'hostname',
    'OKTA_USERNAME': 'username',
    'OKTA_PASSWORD': 'password',
}


class Config(object):
    """
       Collects the login settings. A CLI argument wins over an OKTA_*
       environment variable, which wins over the profile in the config file.

       Config file options (INI, one section per profile):
            okta_hostname = Okta host, optionally followed by the app path to log in to
            okta_username = (optional) Okta User Name
            verify_ssl_certs = (optional) y/n, defaults to y
            duo_poll_attempts = (optional) maximum number of Duo status checks
            inherits = (optional) name of a profile to take missing values from
    """

    def __init__(self, login_ui):
        """
        :type login_ui: ui.UserInterface
        """
        self.ui = login_ui
        self.OKTA_SAML_CONFIG = self.ui.environ.get(
            'OKTA_SAML_CONFIG', os.path.join(self.ui.HOME, '.okta_saml_config'))
        self.conf_profile = 'DEFAULT'
        self.hostname = None
        self.username = None
        self.password = None
        self.verify_ssl_certs = True
        self.duo_poll_attempts = None

        for env_name, attribute in ENV_SETTINGS.items():
            if self.ui.environ.get(env_name) is not None:
                setattr(self, attribute, self.ui.environ[env_name])

    def get_args(self):
        """Get the CLI args"""
        parser = argparse.ArgumentParser(
            description="Log in to Okta, answer the SMS, TOTP or Duo challenge "
                        "and print the base64 SAML assertion of the app"
        )
        parser.add_argument(
            '--hostname', '-H',
            help="Okta host, optionally followed by the path of the SAML app "
                 "(example.okta.com/home/amazon_aws/0oa1/272). Defaults to OKTA_HOSTNAME."
        )
        parser.add_argument(
            '--username', '-u',
            help="Okta username. Defaults to OKTA_USERNAME, you are asked for it when neither is set."
        )
        parser.add_argument(
            '--profile', '-p',
            help='Profile of the config file to read, DEFAULT when omitted.'
        )
        parser.add_argument(
            '--insecure', '-k',
            action='store_true',
            help='Skip TLS certificate verification.'
        )
        parser.add_argument(
            '--duo-poll-attempts',
            type=int,
            help='Give up on a Duo push after this many status checks (3 seconds apart). '
                 'By default waits until Duo answers.'
        )
        parser.add_argument(
            '--version', action='version',
            version='%(prog)s {}'.format(version),
            help='print the okta-saml version')
        args = parser.parse_args(self.ui.args)

        if args.insecure:
            self.ui.warning("Warning: SSL certificate validation is disabled!")
            self.verify_ssl_certs = False

        for attribute in ('hostname', 'username', 'duo_poll_attempts'):
            value = getattr(args, attribute)
            if value is not None:
                setattr(self, attribute, value)
        self.check_poll_attempts(self.duo_poll_attempts)
        self.conf_profile = args.profile or 'DEFAULT'

    def _resolve_profile(self, parser, name, seen=()):
        """ profile values laid over the profiles they inherit from """
        if name not in parser:
            if not seen:
                raise errors.OktaSamlError(
                    'Configuration profile {} not found in {}!'.format(name, self.OKTA_SAML_CONFIG))
            raise errors.OktaSamlError(
                '{} inherits from {}, but could not find {}'.format(seen[-1], name, name))
        if name in seen:
            raise errors.OktaSamlError(
                'Profile inheritance loop: {}'.format(' -> '.join(seen + (name,))))

        profile = dict(parser[name])
        parent = profile.pop('inherits', None)
        if parent is None:
            return profile

        self.ui.message("Using inherited config: " + parent)
        resolved = self._resolve_profile(parser, parent, seen + (name,))
        resolved.update(profile)
        return resolved

    def get_config_dict(self):
        """the selected profile of the config file, {} when there is no file and no profile was asked for"""
        if not os.path.isfile(self.OKTA_SAML_CONFIG):
            if self.conf_profile != 'DEFAULT':
                raise errors.OktaSamlError('Configuration file {} not found!'.format(self.OKTA_SAML_CONFIG))
            return {}

        parser = configparser.ConfigParser()
        parser.read(self.OKTA_SAML_CONFIG)
        return self._resolve_profile(parser, self.conf_profile)

    def apply_config_dict(self, conf_dict):
        """fills in whatever the CLI and environment left unset"""
        if self.hostname is None:
            self.hostname = conf_dict.get('okta_hostname') or None
        if self.username is None:
            self.username = conf_dict.get('okta_username') or None

        if self.duo_poll_attempts is None and conf_dict.get('duo_poll_attempts'):
            try:
                self.duo_poll_attempts = int(conf_dict['duo_poll_attempts'])
            except ValueError:
                raise errors.OktaSamlError(
                    'duo_poll_attempts must be an integer, got {!r}'.format(conf_dict['duo_poll_attempts']))
            self.check_poll_attempts(self.duo_poll_attempts)

        if conf_dict.get('verify_ssl_certs', 'y').strip().lower() in ('n', 'no', 'false'):
            self.verify_ssl_certs = False

        if not self.hostname:
            raise errors.OktaSamlError(
                'No Okta hostname configured! Use --hostname, OKTA_HOSTNAME or okta_hostname in {}.'.format(
                    self.OKTA_SAML_CONFIG))
        self.hostname = self.normalize_hostname(self.hostname)

    @staticmethod
    def check_poll_attempts(attempts):
        """ None means no limit, otherwise at least one status check is needed """
        if attempts is not None and attempts < 1:
            raise errors.OktaSamlError('duo_poll_attempts must be at least 1, got {}'.format(attempts))

    @staticmethod
    def normalize_hostname(hostname):
        """ accept 'https://example.okta.com/' as well as 'example.okta.com' """
        hostname = hostname.strip()
        for scheme in ('https://', 'http://'):
            if hostname.lower().startswith(scheme):
                hostname = hostname[len(scheme):]
        return hostname.rstrip('/')
