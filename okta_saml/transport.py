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
import requests
from requests.exceptions import InvalidHeader, InvalidSchema, InvalidURL, MissingSchema, URLRequired

from . import errors, version

REQUEST_BUILD_ERRORS = (InvalidHeader, InvalidSchema, InvalidURL, MissingSchema, URLRequired)


def new_session(verify_ssl_certs=True):
    """ A session whose cookie jar lives for exactly one authentication attempt """
    if verify_ssl_certs is False:
        requests.packages.urllib3.disable_warnings()

    session = requests.Session()
    session.cookies = requests.cookies.RequestsCookieJar()
    session.verify = verify_ssl_certs
    return session


def get_headers():
    """sets the default headers"""
    headers = {
        'User-Agent': "okta-saml {}".format(version),
        'Accept': 'application/json',
        'Content-Type': 'application/json',
    }
    return headers


def get_form_headers():
    form_headers = {
        'User-Agent': "okta-saml {}".format(version),
        'Accept': 'application/json',
        'Content-Type': 'application/x-www-form-urlencoded; charset=UTF-8'
    }
    return form_headers


def send(session, method, url, stage, raise_for_status=True, **kwargs):
    """ Issue one request, wrapping every requests failure with the stage it happened in

    :param session: requests.Session carrying the attempt's cookies
    :param stage: human readable description of the step, used in errors
    :param raise_for_status: treat 4xx/5xx responses as transport failures
    """
    try:
        response = session.request(method, url, **kwargs)
        if raise_for_status:
            response.raise_for_status()
    except REQUEST_BUILD_ERRORS as err:
        raise errors.RequestBuildError(stage, str(err)) from err
    except requests.RequestException as err:
        raise errors.TransportError(stage, str(err)) from err
    return response
