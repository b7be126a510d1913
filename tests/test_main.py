import unittest
from unittest.mock import patch

from okta_saml import errors
from okta_saml.main import OktaSamlLogin
from okta_saml.okta import Credentials
from tests.user_interface_mock import MockUserInterface


class TestMain(unittest.TestCase):

    @patch('okta_saml.main.OktaSamlClient.authenticate', return_value='YXNzZXJ0aW9u')
    def test_run_prints_assertion(self, mock_authenticate):
        test_ui = MockUserInterface(
            environ={'OKTA_PASSWORD': '1234qwert'},
            argv=['okta-saml', '--hostname', 'example.okta.com', '--username', 'ann'],
        )

        result = OktaSamlLogin(ui=test_ui).run()

        self.assertEqual(result, 'YXNzZXJ0aW9u')
        self.assertEqual(test_ui.results, ['YXNzZXJ0aW9u'])
        mock_authenticate.assert_called_once_with(
            Credentials(username='ann', password='1234qwert', hostname='example.okta.com'))

    def test_prompts_for_missing_credentials(self):
        test_ui = MockUserInterface(
            argv=['okta-saml', '--hostname', 'example.okta.com'],
            answers=['ann', '', '1234qwert'],
        )

        credentials = OktaSamlLogin(ui=test_ui).get_credentials()

        self.assertEqual(credentials, Credentials(username='ann', password='1234qwert', hostname='example.okta.com'))
        self.assertIn('Okta Password for ann: ', test_ui.prompts)

    def test_missing_hostname(self):
        test_ui = MockUserInterface(argv=['okta-saml'])
        with self.assertRaises(errors.OktaSamlError):
            OktaSamlLogin(ui=test_ui).run()

    @patch('okta_saml.main.OktaSamlLogin.run', side_effect=errors.OktaSamlError('unsupported mfa provider'))
    def test_main_exits_on_error(self, mock_run):
        with self.assertRaises(SystemExit) as ctx:
            OktaSamlLogin.main()
        self.assertEqual(ctx.exception.code, 1)

    def test_prompted_password_is_sent_as_typed(self):
        test_ui = MockUserInterface(
            argv=['okta-saml', '--hostname', 'example.okta.com', '--username', 'ann'],
            answers=['  pa ss  '],
        )

        credentials = OktaSamlLogin(ui=test_ui).get_credentials()

        self.assertEqual(credentials.password, '  pa ss  ')
