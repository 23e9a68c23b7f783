#
# Tests for the octoDNS provider built on the DNSPod services
#

from unittest import TestCase
from unittest.mock import Mock, call

from octodns.record import Record
from octodns.zone import Zone

from octodns_dnspod import (
    DnspodClient,
    DnspodClientException,
    DnspodClientNotFound,
    DnspodProvider,
)
from octodns_dnspod.models import Domain, ListParams
from octodns_dnspod.models import Record as DnspodRecord


def _provider():
    provider = DnspodProvider('test', '42,secret')
    client = Mock()
    provider._client = client
    return provider, client


class TestDnspodProviderInit(TestCase):
    def test_config(self):
        provider = DnspodProvider(
            'test',
            '42,secret',
            lang='en',
            user_id='7',
            base_url='https://api.dnspod.com/',
            timeout=30,
            record_line_id=0,
        )
        self.assertIsInstance(provider._client, DnspodClient)
        common_params = provider._client.common_params
        self.assertEqual('42,secret', common_params.login_token)
        self.assertEqual('en', common_params.lang)
        self.assertEqual('7', common_params.user_id)
        self.assertEqual('https://api.dnspod.com/', provider._client.base_url)
        self.assertEqual(30, provider._client.timeout)
        self.assertEqual('0', provider.record_line_id)


class TestDnspodProviderRead(TestCase):
    def test_list_zones(self):
        provider, client = _provider()
        client.domains.list.return_value = [
            Domain(id='2', name='b.tests'),
            Domain(id='1', name='a.tests'),
            Domain(id='3'),
        ]
        self.assertEqual(['a.tests.', 'b.tests.'], provider.list_zones())

    def test_zone_metadata_cached(self):
        provider, client = _provider()
        client.domains.get.return_value = Domain(id='42', name='unit.tests')

        provider.zone_metadata('unit.tests.')
        provider.zone_metadata('unit.tests.')

        client.domains.get.assert_called_once_with(None, 'unit.tests')

    def test_zone_metadata_missing(self):
        provider, client = _provider()
        client.domains.get.return_value = Domain()
        with self.assertRaises(DnspodClientNotFound):
            provider.zone_metadata('missing.tests.')

    def test_populate_missing_zone(self):
        provider, client = _provider()
        client.domains.get.return_value = Domain()

        zone = Zone('unit.tests.', [])
        self.assertFalse(provider.populate(zone))
        self.assertEqual(0, len(zone.records))
        client.records.list.assert_not_called()

    def test_populate(self):
        provider, client = _provider()
        client.domains.get.return_value = Domain(
            id='42', name='unit.tests', ttl='600'
        )
        client.records.list.return_value = [
            DnspodRecord(
                id='1', name='@', type='A', value='1.2.3.4', ttl='300',
                line_id='0',
            ),
            DnspodRecord(
                id='2', name='@', type='A', value='1.2.3.5', ttl='300',
                line_id='0',
            ),
            DnspodRecord(
                id='3', name='www', type='CNAME', value='unit.tests',
                ttl='600', line_id='0',
            ),
            DnspodRecord(
                id='4', name='@', type='MX', value='mx1.unit.tests.',
                mx='10', ttl='600', line_id='0',
            ),
            DnspodRecord(
                id='5', name='txt', type='TXT', value='v=spf1 -all;',
                line_id='0',
            ),
            DnspodRecord(
                id='6', name='_srv._tcp', type='SRV',
                value='10 20 30 target.unit.tests.', ttl='600', line_id='0',
            ),
            DnspodRecord(
                id='7', name='@', type='CAA', value='0 issue "ca.unit.tests"',
                ttl='600', line_id='0',
            ),
            DnspodRecord(
                id='8', name='@', type='NS', value='f1g1ns1.dnspod.net.',
                ttl='86400', line_id='0',
            ),
            DnspodRecord(
                id='9', name='sub', type='NS', value='ns1.other.tests',
                ttl='3600', line_id='0',
            ),
            DnspodRecord(
                id='10', name='@', type='A', value='9.9.9.9', ttl='300',
                line_id='10=1',
            ),
            DnspodRecord(
                id='11', name='go', type='URL', value='https://unit.tests/',
                line_id='0',
            ),
        ]

        zone = Zone('unit.tests.', [])
        self.assertTrue(provider.populate(zone))
        client.records.list.assert_called_once_with(ListParams(domain_id='42'))

        records = {(r.name, r._type): r for r in zone.records}
        self.assertEqual(
            {
                ('', 'A'),
                ('www', 'CNAME'),
                ('', 'MX'),
                ('txt', 'TXT'),
                ('_srv._tcp', 'SRV'),
                ('', 'CAA'),
                ('sub', 'NS'),
            },
            set(records),
        )

        a = records[('', 'A')]
        self.assertEqual(300, a.ttl)
        self.assertEqual(['1.2.3.4', '1.2.3.5'], a.values)

        self.assertEqual('unit.tests.', records[('www', 'CNAME')].value)

        mx = records[('', 'MX')].values[0]
        self.assertEqual(10, mx.preference)
        self.assertEqual('mx1.unit.tests.', mx.exchange)

        txt = records[('txt', 'TXT')]
        # no ttl on the record, the domain default applies
        self.assertEqual(600, txt.ttl)
        self.assertEqual(['v=spf1 -all\\;'], txt.values)

        srv = records[('_srv._tcp', 'SRV')].values[0]
        self.assertEqual(
            (10, 20, 30, 'target.unit.tests.'),
            (srv.priority, srv.weight, srv.port, srv.target),
        )

        caa = records[('', 'CAA')].values[0]
        self.assertEqual(
            (0, 'issue', 'ca.unit.tests'), (caa.flags, caa.tag, caa.value)
        )

        self.assertEqual(['ns1.other.tests.'], records[('sub', 'NS')].values)

    def test_populate_caa_fallback(self):
        provider, client = _provider()
        client.domains.get.return_value = Domain(id='42', ttl='600')
        client.records.list.return_value = [
            DnspodRecord(
                id='1', name='@', type='CAA', value='malformed', ttl='600'
            )
        ]

        zone = Zone('unit.tests.', [])
        provider.populate(zone)

        caa = list(zone.records)[0].values[0]
        self.assertEqual(
            (0, 'issue', 'malformed'), (caa.flags, caa.tag, caa.value)
        )


class TestDnspodProviderApply(TestCase):
    def test_apply_creates_zone(self):
        provider, client = _provider()
        client.domains.get.return_value = Domain()
        client.domains.create.return_value = Domain(id='99')

        zone = Zone('unit.tests.', [])
        zone.add_record(
            Record.new(
                zone,
                '',
                {'ttl': 300, 'type': 'A', 'values': ['1.2.3.4', '1.2.3.5']},
            )
        )
        zone.add_record(
            Record.new(
                zone,
                'mail',
                {
                    'ttl': 600,
                    'type': 'MX',
                    'value': {'preference': 10, 'exchange': 'mx1.unit.tests.'},
                },
            )
        )
        zone.add_record(
            Record.new(
                zone,
                'txt',
                {'ttl': 600, 'type': 'TXT', 'value': 'a\\;b'},
            )
        )

        plan = provider.plan(zone)
        self.assertFalse(plan.exists)
        self.assertEqual(3, provider.apply(plan))

        client.domains.create.assert_called_once_with(Domain(name='unit.tests'))
        client.records.create.assert_has_calls(
            [
                call(
                    'unit.tests',
                    '99',
                    DnspodRecord(
                        name='@', type='A', value='1.2.3.4', ttl='300',
                        line_id='0',
                    ),
                ),
                call(
                    'unit.tests',
                    '99',
                    DnspodRecord(
                        name='@', type='A', value='1.2.3.5', ttl='300',
                        line_id='0',
                    ),
                ),
                call(
                    'unit.tests',
                    '99',
                    DnspodRecord(
                        name='mail', type='MX', value='mx1.unit.tests.',
                        mx='10', ttl='600', line_id='0',
                    ),
                ),
                call(
                    'unit.tests',
                    '99',
                    DnspodRecord(
                        name='txt', type='TXT', value='a;b', ttl='600',
                        line_id='0',
                    ),
                ),
            ],
            any_order=True,
        )
        self.assertEqual(4, client.records.create.call_count)

    def test_apply_create_zone_failure(self):
        provider, client = _provider()
        client.domains.get.return_value = Domain()
        # Domain.Create does not raise on a failed status
        client.domains.create.return_value = Domain()

        zone = Zone('unit.tests.', [])
        zone.add_record(
            Record.new(
                zone, 'www', {'ttl': 300, 'type': 'A', 'value': '1.2.3.4'}
            )
        )

        plan = provider.plan(zone)
        with self.assertRaises(DnspodClientException) as ctx:
            provider.apply(plan)
        self.assertIn('could not create domain unit.tests', str(ctx.exception))
        client.records.create.assert_not_called()

    def test_apply_update_and_delete(self):
        provider, client = _provider()
        client.domains.get.return_value = Domain(
            id='42', name='unit.tests', ttl='600'
        )
        client.records.list.return_value = [
            DnspodRecord(
                id='1', name='@', type='A', value='1.2.3.4', ttl='300',
                line_id='0',
            ),
            DnspodRecord(
                id='2', name='old', type='A', value='2.2.2.2', ttl='300',
                line_id='0',
            ),
            DnspodRecord(
                id='3', name='@', type='A', value='9.9.9.9', ttl='300',
                line_id='10=1',
            ),
        ]

        zone = Zone('unit.tests.', [])
        zone.add_record(
            Record.new(
                zone,
                '',
                {'ttl': 300, 'type': 'A', 'values': ['1.2.3.4', '5.6.7.8']},
            )
        )

        plan = provider.plan(zone)
        self.assertTrue(plan.exists)
        self.assertEqual(2, len(plan.changes))
        provider.apply(plan)

        client.domains.create.assert_not_called()
        client.records.delete.assert_has_calls(
            [call(42, 'unit.tests', '1'), call(42, 'unit.tests', '2')],
            any_order=True,
        )
        # other routing lines are left alone
        self.assertEqual(2, client.records.delete.call_count)
        client.records.create.assert_has_calls(
            [
                call(
                    'unit.tests',
                    '42',
                    DnspodRecord(
                        name='@', type='A', value='1.2.3.4', ttl='300',
                        line_id='0',
                    ),
                ),
                call(
                    'unit.tests',
                    '42',
                    DnspodRecord(
                        name='@', type='A', value='5.6.7.8', ttl='300',
                        line_id='0',
                    ),
                ),
            ],
            any_order=True,
        )
        # caches are dropped after apply
        self.assertNotIn('unit.tests.', provider._zone_records)
        self.assertNotIn('unit.tests.', provider._zone_metadata)
