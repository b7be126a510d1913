"""Unit tests for okta_saml.extract"""
import unittest
from unittest.mock import Mock

from okta_saml import errors
from okta_saml.extract import decode_json, find_input_value, json_get, json_require, require_input_value
from tests import read_fixture


class TestExtract(unittest.TestCase):
    def setUp(self):
        self.login_data = {
            'status': 'MFA_REQUIRED',
            'stateToken': 'st1',
            '_embedded': {
                'factors': [
                    {'id': 'f1', '_links': {'verify': {'href': 'https://x/verify'}}},
                    {'id': 'f2'},
                ]
            }
        }

    def test_json_get(self):
        self.assertEqual(json_get(self.login_data, 'stateToken'), 'st1')
        self.assertEqual(json_get(self.login_data, '_embedded.factors.0._links.verify.href'), 'https://x/verify')
        self.assertEqual(json_get(self.login_data, '_embedded.factors.1.id'), 'f2')

    def test_json_get_missing(self):
        self.assertIsNone(json_get(self.login_data, 'sessionToken'))
        self.assertIsNone(json_get(self.login_data, '_embedded.factors.5.id'))
        self.assertIsNone(json_get(self.login_data, '_embedded.factors.first.id'))
        self.assertIsNone(json_get(self.login_data, 'status.code'))
        self.assertEqual(json_get(self.login_data, '_embedded.user', {}), {})

    def test_json_require(self):
        self.assertEqual(json_require(self.login_data, 'status', 'testing'), 'MFA_REQUIRED')
        with self.assertRaises(errors.ProtocolError) as ctx:
            json_require(self.login_data, 'sessionToken', 'testing')
        self.assertEqual(str(ctx.exception), 'testing: missing field sessionToken')

    def test_decode_json_failure(self):
        response = Mock(status_code=500)
        response.json.side_effect = ValueError('No JSON object could be decoded')
        with self.assertRaises(errors.ProtocolError):
            decode_json(response, 'testing')

    def test_find_input_value(self):
        document = read_fixture('saml_response.html')
        self.assertEqual(find_input_value(document, 'SAMLResponse'), 'YXNzZXJ0aW9u')
        self.assertEqual(find_input_value(document, 'RelayState'), '')
        self.assertIsNone(find_input_value(document, 'sid'))

    def test_require_input_value(self):
        document = read_fixture('duo_frame_auth.html')
        self.assertEqual(require_input_value(document, 'sid', 'testing'), 'ZGlyZWN0&amp;c2lk%7C1234')
        self.assertEqual(require_input_value(document, 'sid', 'testing', unescape=True), 'ZGlyZWN0&c2lk%7C1234')
        with self.assertRaises(errors.ProtocolError):
            require_input_value(document, 'SAMLResponse', 'testing')
