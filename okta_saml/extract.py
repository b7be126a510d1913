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
import html

from bs4 import BeautifulSoup

from . import errors


def json_get(data, path, default=None):
    """ Read a value out of a decoded JSON document by dotted path.

    Numeric path segments index into lists, so ``_embedded.factors.0.id``
    reads the id of the first factor. Anything missing along the way
    yields ``default``.
    """
    current = data
    for key in path.split('.'):
        if isinstance(current, dict):
            if key not in current:
                return default
            current = current[key]
        elif isinstance(current, list):
            try:
                current = current[int(key)]
            except (ValueError, IndexError):
                return default
        else:
            return default

    if current is None:
        return default
    return current


def json_require(data, path, stage):
    """ Same as json_get but a missing or empty value is a protocol error """
    value = json_get(data, path)
    if value is None or value == '':
        raise errors.ProtocolError(stage, 'missing field {}'.format(path))
    return value


def decode_json(response, stage):
    """ Decode a response body, reporting a non-JSON body as a protocol error """
    try:
        return response.json()
    except ValueError as err:
        raise errors.ProtocolError(stage, 'response is not JSON (HTTP {})'.format(response.status_code)) from err


def find_input_value(document, name):
    """ Return the value of the first <input> element with the given name, or None """
    soup = BeautifulSoup(document, "html.parser")
    for input_tag in soup.find_all('input'):
        if input_tag.get('name') == name:
            return input_tag.get('value')
    return None


def require_input_value(document, name, stage, unescape=False):
    """ Scrape a named <input> value, failing the stage when it is absent """
    value = find_input_value(document, name)
    if value is None:
        raise errors.ProtocolError(stage, 'unable to locate {} input'.format(name))
    if unescape:
        value = html.unescape(value)
    return value
