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
from collections import namedtuple
from enum import Enum

from .extract import json_get


class MfaCapability(Enum):
    DUO_PUSH = 'DUO WEB'
    SMS_OTP = 'OKTA SMS'
    TOTP_OTP = 'GOOGLE TOKEN:SOFTWARE:TOTP'
    UNSUPPORTED = None


SUPPORTED_MFA_LABELS = {
    MfaCapability.DUO_PUSH: 'DUO MFA authentication',
    MfaCapability.SMS_OTP: 'SMS MFA authentication',
    MfaCapability.TOTP_OTP: 'TOTP MFA authentication',
}

MfaFactor = namedtuple('MfaFactor', ['id', 'provider', 'factor_type', 'verify_url', 'identifier', 'capability'])


def mfa_identifier(provider, factor_type):
    """ Build the lookup key for a factor, e.g. ('okta', 'sms') -> 'OKTA SMS' """
    return '{} {}'.format(provider or '', factor_type or '').upper()


def identify(provider, factor_type):
    """ Map a (provider, factorType) pair to its capability.

    Every pair maps to something: pairs outside the supported table map to
    MfaCapability.UNSUPPORTED.
    """
    identifier = mfa_identifier(provider, factor_type)
    for capability in SUPPORTED_MFA_LABELS:
        if capability.value == identifier:
            return capability
    return MfaCapability.UNSUPPORTED


def factor_label(factor):
    """ Display name of a factor as shown to the user when choosing """
    if factor.capability is MfaCapability.UNSUPPORTED:
        return 'UNSUPPORTED: ' + factor.identifier
    return SUPPORTED_MFA_LABELS[factor.capability]


def is_supported(factor):
    return factor.capability is not MfaCapability.UNSUPPORTED


def parse_factors(login_data):
    """ Build the ordered MfaFactor list from an MFA_REQUIRED authn response """
    factors = []
    for raw in json_get(login_data, '_embedded.factors', []):
        provider = json_get(raw, 'provider', '')
        factor_type = json_get(raw, 'factorType', '')
        factors.append(MfaFactor(
            id=json_get(raw, 'id'),
            provider=provider,
            factor_type=factor_type,
            verify_url=json_get(raw, '_links.verify.href'),
            identifier=mfa_identifier(provider, factor_type),
            capability=identify(provider, factor_type),
        ))
    return factors
