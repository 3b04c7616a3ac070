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

from stacksession import discover
from stacksession import service_types
from stacksession.tests.unit import utils


class ServiceTypeDescriptorTests(utils.TestCase):

    def test_compute_headers(self):
        headers = {}
        descriptor = service_types.get_descriptor('compute')
        descriptor.set_version_headers(headers, discover.ApiVersion(2, 79))

        self.assertEqual({'OpenStack-API-Version': 'compute 2.79',
                          'X-OpenStack-Nova-API-Version': '2.79'}, headers)

    def test_block_storage_headers(self):
        headers = {}
        descriptor = service_types.get_descriptor('volumev3')
        descriptor.set_version_headers(headers, discover.ApiVersion(3, 27))

        self.assertEqual('block-storage', descriptor.service_type)
        self.assertEqual({'OpenStack-API-Version': 'volume 3.27'}, headers)

    def test_identity_media_type(self):
        headers = {'Accept': 'application/json'}
        descriptor = service_types.get_descriptor('identity')
        descriptor.set_version_headers(headers, discover.ApiVersion(3, 14))

        self.assertEqual(
            {'Accept': 'application/vnd.openstack.identity-v3.14+json'},
            headers)

    def test_no_headers_for_image(self):
        headers = {}
        descriptor = service_types.get_descriptor('image')
        descriptor.set_version_headers(headers, discover.ApiVersion(2, 5))

        self.assertFalse(descriptor.has_version_headers)
        self.assertEqual({}, headers)
        self.assertIsNone(descriptor.parse_version_headers(headers))

    def test_headers_replaced_case_insensitively(self):
        headers = {'openstack-api-version': 'compute 2.1'}
        descriptor = service_types.get_descriptor('compute')
        descriptor.set_version_headers(headers, discover.ApiVersion(2, 5))

        self.assertEqual('compute 2.5', headers['OpenStack-API-Version'])
        self.assertNotIn('openstack-api-version', headers)

    def test_header_round_trip(self):
        versions = [discover.ApiVersion(2, 1), discover.ApiVersion(3, 27),
                    discover.ApiVersion(1, 80), discover.ApiVersion(3)]

        for service_type in ('compute', 'block-storage', 'shared-file-system',
                             'baremetal', 'placement', 'identity'):
            descriptor = service_types.get_descriptor(service_type)
            for version in versions:
                headers = {}
                descriptor.set_version_headers(headers, version)
                self.assertEqual(version,
                                 descriptor.parse_version_headers(headers))

    def test_parse_other_services_in_header(self):
        descriptor = service_types.get_descriptor('block-storage')
        headers = {'OpenStack-API-Version': 'compute 2.1, volume 3.5'}

        self.assertEqual(discover.ApiVersion(3, 5),
                         descriptor.parse_version_headers(headers))

    def test_parse_legacy_header(self):
        descriptor = service_types.get_descriptor('baremetal')
        headers = {'X-OpenStack-Ironic-API-Version': '1.31'}

        self.assertEqual(discover.ApiVersion(1, 31),
                         descriptor.parse_version_headers(headers))

    def test_unknown_service_type(self):
        descriptor = service_types.get_descriptor('my-service')

        self.assertEqual('my-service', descriptor.service_type)
        self.assertFalse(descriptor.has_version_headers)
        self.assertIs(discover.ANY_VERSION, descriptor.default_criterion())

    def test_header_and_media_type_exclusive(self):
        self.assertRaises(ValueError,
                          service_types.ServiceTypeDescriptor,
                          'thing',
                          microversion_name='thing',
                          media_type='application/vnd.thing-v{version}')

    def test_register_descriptor(self):
        descriptor = service_types.ServiceTypeDescriptor(
            'my-registered-service',
            microversion_name='mine',
            default_version=discover.MinimumVersion('1.2'))
        service_types.register_descriptor(descriptor)

        self.assertIs(descriptor,
                      service_types.get_descriptor('my-registered-service'))
        self.assertEqual(discover.MinimumVersion('1.2'),
                         descriptor.default_criterion())


class ServiceTypeTests(utils.TestCase):

    def test_official_type(self):
        self.assertEqual('block-storage',
                         service_types.get_official_type('volumev3'))
        self.assertEqual('compute', service_types.get_official_type('compute'))
        self.assertEqual('unknown', service_types.get_official_type('unknown'))

    def test_implied_version(self):
        self.assertEqual(discover.ApiVersion(3),
                         service_types.implied_version('volumev3'))
        self.assertEqual(discover.ApiVersion(2),
                         service_types.implied_version('sharev2'))
        self.assertIsNone(service_types.implied_version('block-storage'))
        self.assertIsNone(service_types.implied_version('notaservicev2'))

    def test_default_criterion_from_versioned_type(self):
        descriptor = service_types.get_descriptor('volumev3')

        self.assertEqual(discover.VersionRange('3', '3'),
                         descriptor.default_criterion('volumev3'))
        self.assertIs(discover.ANY_VERSION,
                      descriptor.default_criterion('block-storage'))
