import tempfile

from okta_saml import ui


class MockUserInterface(ui.UserInterface):
    """Scripted user: answers come from ``answers``, Chooser picks from ``choices``"""

    def __init__(self, environ=None, argv=None, answers=None, choices=None):
        super().__init__(environ=environ or {}, argv=argv or [])
        self.HOME = tempfile.mkdtemp()
        self.answers = list(answers or [])
        self.choices = list(choices or [])
        self.choose_calls = []
        self.prompts = []
        self.messages = []
        self.results = []

    def choose(self, message, options, max_retries=5):
        self.choose_calls.append((message, list(options)))
        if self.choices:
            return self.choices.pop(0)
        return super().choose(message, options, max_retries)

    def result(self, result):
        self.results.append(result)

    def prompt(self, message=None):
        if message is not None:
            self.prompts.append(message)

    def message(self, message):
        self.messages.append(message)

    def read_input(self, hidden=False):
        return self.answers.pop(0)

    def notify(self, message):
        self.messages.append(message)
