# Licensed under the Apache License, Version 2.0 (the "License"); you may
# not use this file except in compliance with the License. You may obtain
# a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
# License for the specific language governing permissions and limitations
# under the License.

from stacksession.identity import base
from stacksession.identity import v3
from stacksession.identity.access import AccessInfoPlugin


BaseIdentityPlugin = base.BaseIdentityPlugin

V3Password = v3.Password
"""See :class:`stacksession.identity.v3.Password`"""

V3Token = v3.Token
"""See :class:`stacksession.identity.v3.Token`"""

__all__ = (
    'AccessInfoPlugin',
    'BaseIdentityPlugin',
    'V3Password',
    'V3Token',
)
