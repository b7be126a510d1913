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
import builtins
import getpass
import os
import sys


class UserInterface:
    """Everything the login flow says to, or asks from, the person running it.

    The SAML assertion is the only thing sent to ``result``. Progress, Duo
    status lines and warnings go to ``notify``, prompts and option lists to
    ``prompt`` and ``message``. Subclasses decide where these end up.
    """

    def __init__(self, environ=os.environ, argv=None):
        if argv is None:
            argv = sys.argv

        self.environ = dict(environ)
        self.argv = list(argv)
        self.args = self.argv[1:]
        self.HOME = self.environ.get('HOME') or os.path.expanduser('~')

    def result(self, result):
        """the SAML assertion
        :type result: str
        """
        raise NotImplementedError()

    def prompt(self, message):
        """shows the question, reading the answer is left to read_input()
        :type message: str
        """
        raise NotImplementedError()

    def message(self, message):
        """part of an interaction, e.g. one line of an option list
        :type message: str
        """
        raise NotImplementedError()

    def read_input(self, hidden=False):
        """:rtype: str"""
        raise NotImplementedError()

    def notify(self, message):
        """progress and status lines
        :type message: str
        """
        raise NotImplementedError()

    def input(self, message=None, hidden=False):
        self.prompt(message)
        return self.read_input(hidden)

    def input_required(self, message, hidden=False):
        """asks until a non-blank answer is given, hidden answers are returned as typed
        :type message: str
        :rtype: str
        """
        while True:
            value = self.input('{}: '.format(message), hidden)
            if value.strip():
                return value if hidden else value.strip()
            self.warning('A value is required.')

    def choose(self, message, options, max_retries=5):
        """lists the options and asks the user to pick one of them

        :param message: heading printed above the options
        :param options: ordered list of option labels
        :param max_retries: number of invalid answers tolerated
        :return: index of the selected option, None when no valid answer was given
        :rtype: int
        """
        self.message(message)
        for i, option in enumerate(options):
            self.message('[{}] {}'.format(i, option))

        for _ in range(max_retries):
            value = self.input('Selection: ')
            try:
                selection = int(value.strip())
            except ValueError:
                self.warning(
                    'Invalid selection {!r}, must be an integer value.'.format(value)
                )
                continue

            if 0 <= selection < len(options):
                return selection
            else:
                self.warning(
                    'Selection {!r} out of range <0, {}>'.format(selection, len(options) - 1)
                )

        return None

    def info(self, message):
        self.notify(message)

    def warning(self, message):
        self.notify(message)

    def error(self, message):
        self.notify(message)


class CLIUserInterface(UserInterface):
    """stdout carries the assertion alone so it can be piped, the rest goes to stderr"""

    def result(self, result):
        builtins.print(result, file=sys.stdout)

    def prompt(self, message=None):
        if message is not None:
            builtins.print(message, file=sys.stderr, end='')
            sys.stderr.flush()

    def message(self, message):
        builtins.print(message, file=sys.stderr)

    def read_input(self, hidden=False):
        if hidden:
            return getpass.getpass('')
        return builtins.input()

    def notify(self, message):
        builtins.print(message, file=sys.stderr)


cli = CLIUserInterface()
default = cli
