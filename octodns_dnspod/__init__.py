#
#
#

import logging
import shlex
from collections import defaultdict

from octodns.provider.base import BaseProvider
from octodns.record import Record

__version__ = __VERSION__ = '0.1.0'

from .dnsapi_client import DnspodClient  # noqa: E402
from .exceptions import (  # noqa: E402
    DnspodApiError,
    DnspodClientDecodeError,
    DnspodClientException,
    DnspodClientNotFound,
    DnspodClientUnauthorized,
)
from .models import Domain, ListParams  # noqa: E402
from .models import Record as DnspodRecord  # noqa: E402

__all__ = [
    'DnspodProvider',
    'DnspodClient',
    'DnspodApiError',
    'DnspodClientDecodeError',
    'DnspodClientException',
    'DnspodClientNotFound',
    'DnspodClientUnauthorized',
]


class DnspodProvider(BaseProvider):
    SUPPORTS_GEO = False
    SUPPORTS_DYNAMIC = False
    # the apex NS set belongs to DNSPod and cannot be changed
    SUPPORTS_ROOT_NS = False
    SUPPORTS = set(('A', 'AAAA', 'CAA', 'CNAME', 'MX', 'NS', 'SRV', 'TXT'))

    DEFAULT_TTL = 600

    def __init__(self, id, login_token, *args, **kwargs):
        self.log = logging.getLogger(f'DnspodProvider[{id}]')
        lang = kwargs.pop('lang', None)
        user_id = kwargs.pop('user_id', None)
        base_url = kwargs.pop('base_url', None)
        timeout = kwargs.pop('timeout', None)
        record_line_id = kwargs.pop('record_line_id', '0')
        self.log.debug(
            '__init__: id=%s, login_token=***, base_url=%s, record_line_id=%s',
            id,
            base_url,
            record_line_id,
        )
        super().__init__(id, *args, **kwargs)

        self._client = DnspodClient(
            login_token,
            lang=lang,
            user_id=user_id,
            base_url=base_url,
            timeout=timeout,
        )
        self.record_line_id = str(record_line_id)

        self._zone_records = {}
        self._zone_metadata = {}

    def _append_dot(self, value):
        if value == '@' or value[-1] == '.':
            return value
        return f'{value}.'

    def zone_metadata(self, zone_name):
        if zone_name not in self._zone_metadata:
            # Domain.Info does not check its status code, an unknown domain
            # comes back without an id
            domain = self._client.domains.get(None, zone_name[:-1])
            if not domain.id:
                raise DnspodClientNotFound()
            self._zone_metadata[zone_name] = domain

        return self._zone_metadata[zone_name]

    def _record_ttl(self, zone_name, record):
        if record.ttl:
            return int(record.ttl)
        default_ttl = self.zone_metadata(zone_name).ttl
        return int(default_ttl) if default_ttl else self.DEFAULT_TTL

    def _data_for_multiple(self, zone_name, _type, records):
        values = [record.value.replace(';', '\\;') for record in records]
        return {
            'ttl': self._record_ttl(zone_name, records[0]),
            'type': _type,
            'values': values,
        }

    _data_for_A = _data_for_multiple
    _data_for_AAAA = _data_for_multiple
    _data_for_TXT = _data_for_multiple

    def _data_for_CAA(self, zone_name, _type, records):
        values = []
        for record in records:
            raw = record.value
            try:
                flags, tag, value = shlex.split(raw)[:3]
                values.append(
                    {'flags': int(flags), 'tag': tag, 'value': value}
                )
            except ValueError as e:
                self.log.warning(
                    '_data_for_CAA: failed to parse CAA record %r: %s, '
                    'using fallback values (flags=0, tag=issue)',
                    raw,
                    e,
                )
                values.append({'flags': 0, 'tag': 'issue', 'value': raw})
        return {
            'ttl': self._record_ttl(zone_name, records[0]),
            'type': _type,
            'values': values,
        }

    def _data_for_CNAME(self, zone_name, _type, records):
        record = records[0]
        return {
            'ttl': self._record_ttl(zone_name, record),
            'type': _type,
            'value': self._append_dot(record.value),
        }

    def _data_for_MX(self, zone_name, _type, records):
        values = []
        for record in records:
            # the preference travels in its own field, not in the value
            values.append(
                {
                    'preference': int(record.mx or 0),
                    'exchange': self._append_dot(record.value),
                }
            )
        return {
            'ttl': self._record_ttl(zone_name, records[0]),
            'type': _type,
            'values': values,
        }

    def _data_for_NS(self, zone_name, _type, records):
        return {
            'ttl': self._record_ttl(zone_name, records[0]),
            'type': _type,
            'values': [self._append_dot(r.value) for r in records],
        }

    def _data_for_SRV(self, zone_name, _type, records):
        values = []
        for record in records:
            priority, weight, port, target = record.value.split()
            values.append(
                {
                    'port': int(port),
                    'priority': int(priority),
                    'target': self._append_dot(target),
                    'weight': int(weight),
                }
            )
        return {
            'ttl': self._record_ttl(zone_name, records[0]),
            'type': _type,
            'values': values,
        }

    def list_zones(self):
        self.log.debug('list_zones:')
        domains = self._client.domains.list()
        return sorted(f'{d.name}.' for d in domains if d.name)

    def zone_records(self, zone):
        if zone.name not in self._zone_records:
            try:
                domain_id = self.zone_metadata(zone.name).id
            except DnspodClientNotFound:
                return []
            self._zone_records[zone.name] = self._client.records.list(
                ListParams(domain_id=domain_id)
            )

        return self._zone_records[zone.name]

    def _on_record_line(self, record):
        return record.line_id is None or record.line_id == self.record_line_id

    def populate(self, zone, target=False, lenient=False):
        self.log.debug(
            'populate: name=%s, target=%s, lenient=%s',
            zone.name,
            target,
            lenient,
        )

        values = defaultdict(lambda: defaultdict(list))
        for record in self.zone_records(zone):
            _type = record.type
            if _type not in self.SUPPORTS:
                self.log.warning(
                    'populate: skipping unsupported %s record', _type
                )
                continue
            if not self._on_record_line(record):
                self.log.debug(
                    'populate: skipping %s %s on line %s',
                    record.name,
                    _type,
                    record.line_id,
                )
                continue
            name = '' if record.name == '@' else record.name
            if name == '' and _type == 'NS':
                continue
            values[name][_type].append(record)

        before = len(zone.records)
        for name, types in values.items():
            for _type, records in types.items():
                data_for = getattr(self, f'_data_for_{_type}')
                record = Record.new(
                    zone,
                    name,
                    data_for(zone.name, _type, records),
                    source=self,
                    lenient=lenient,
                )
                zone.add_record(record, lenient=lenient)

        exists = zone.name in self._zone_records
        self.log.info(
            'populate:   found %s records, exists=%s',
            len(zone.records) - before,
            exists,
        )
        return exists

    def _new_record(self, record, value, mx=None):
        return DnspodRecord(
            name=record.name or '@',
            type=record._type,
            value=value,
            mx=mx,
            ttl=str(record.ttl),
            line_id=self.record_line_id,
        )

    def _params_for_multiple(self, record):
        for value in record.values:
            yield self._new_record(record, value.replace('\\;', ';'))

    _params_for_A = _params_for_multiple
    _params_for_AAAA = _params_for_multiple
    _params_for_NS = _params_for_multiple
    _params_for_TXT = _params_for_multiple

    def _params_for_CAA(self, record):
        for value in record.values:
            data = f'{value.flags} {value.tag} "{value.value}"'
            yield self._new_record(record, data)

    def _params_for_CNAME(self, record):
        yield self._new_record(record, record.value)

    def _params_for_MX(self, record):
        for value in record.values:
            yield self._new_record(
                record, value.exchange, mx=str(value.preference)
            )

    def _params_for_SRV(self, record):
        for value in record.values:
            data = (
                f'{value.priority} {value.weight} {value.port} '
                f'{value.target}'
            )
            yield self._new_record(record, data)

    def _apply_Create(self, domain_id, change):
        new = change.new
        params_for = getattr(self, f'_params_for_{new._type}')
        zone_name = new.zone.name[:-1]
        for params in params_for(new):
            self._client.records.create(zone_name, domain_id, params)

    def _apply_Update(self, domain_id, change):
        # It's simpler to delete-then-recreate than to update
        self._apply_Delete(domain_id, change)
        self._apply_Create(domain_id, change)

    def _apply_Delete(self, domain_id, change):
        existing = change.existing
        zone_name = existing.zone.name[:-1]
        for record in self.zone_records(existing.zone):
            name = '' if record.name == '@' else record.name
            if (
                existing.name == name
                and existing._type == record.type
                and self._on_record_line(record)
            ):
                self._client.records.delete(
                    int(domain_id), zone_name, record.id
                )

    def _apply(self, plan):
        desired = plan.desired
        changes = plan.changes
        self.log.debug(
            '_apply: zone=%s, len(changes)=%d', desired.name, len(changes)
        )

        try:
            domain_id = self.zone_metadata(desired.name).id
        except DnspodClientNotFound:
            self.log.debug('_apply:   no matching zone, creating domain')
            # Domain.Create does not check its status code either
            domain = self._client.domains.create(
                Domain(name=desired.name[:-1])
            )
            if not domain.id:
                raise DnspodClientException(
                    f'could not create domain {desired.name[:-1]}'
                )
            domain_id = domain.id

        for change in changes:
            class_name = change.__class__.__name__
            getattr(self, f'_apply_{class_name}')(domain_id, change)

        # Clear out the cache if any
        self._zone_records.pop(desired.name, None)
        self._zone_metadata.pop(desired.name, None)
