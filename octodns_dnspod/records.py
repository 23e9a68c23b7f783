#
#
#

"""Record operations of the DNSPod API.

DNSPod API docs:
- https://www.dnspod.cn/docs/records.html
- https://docs.dnspod.com/api/
"""

import logging
from dataclasses import dataclass, field
from typing import List

from .clients import Method, Transport
from .exceptions import DnspodApiError
from .models import (
    SUCCESS_CODE,
    DomainInfo,
    ListParams,
    Record,
    RecordModify,
    Status,
    set_param,
)

# Record.List answers "10" when the request was fine but matched nothing
NO_RECORDS_CODE = '10'


@dataclass
class RecordListEnvelope:
    status: Status = field(default_factory=Status)
    info: DomainInfo = field(default_factory=DomainInfo)
    records: List[Record] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data):
        return cls(
            status=Status.from_dict(data.get('status')),
            info=DomainInfo.from_dict(data.get('info')),
            records=[Record.from_dict(r) for r in data.get('records') or []],
        )


@dataclass
class RecordEnvelope:
    status: Status = field(default_factory=Status)
    info: DomainInfo = field(default_factory=DomainInfo)
    record: Record = field(default_factory=Record)

    @classmethod
    def from_dict(cls, data):
        return cls(
            status=Status.from_dict(data.get('status')),
            info=DomainInfo.from_dict(data.get('info')),
            record=Record.from_dict(data.get('record')),
        )


@dataclass
class RecordModifyEnvelope:
    status: Status = field(default_factory=Status)
    record: RecordModify = field(default_factory=RecordModify)

    @classmethod
    def from_dict(cls, data):
        return cls(
            status=Status.from_dict(data.get('status')),
            record=RecordModify.from_dict(data.get('record')),
        )


def _check(action, status, accepted=(SUCCESS_CODE,)):
    if status.code not in accepted:
        raise DnspodApiError(action, status.code, status.message)


class RecordsService(object):
    """DNS record related methods; every call checks the API status code."""

    def __init__(self, transport: Transport):
        self._transport = transport
        self.log = logging.getLogger('DnspodClient')

    def list(self, params: ListParams) -> List[Record]:
        payload = self._transport.payload()
        payload.update(params.to_params())

        envelope, _ = self._transport.post(
            Method.RECORD_LIST, payload, RecordListEnvelope
        )
        _check(
            'list records',
            envelope.status,
            accepted=(SUCCESS_CODE, NO_RECORDS_CODE),
        )

        self.log.debug(
            'list: domain=%s, records=%d, code=%s',
            params.domain or params.domain_id,
            len(envelope.records),
            envelope.status.code,
        )
        return envelope.records

    def create(self, domain, domain_id, record: Record) -> Record:
        payload = self._transport.payload()
        set_param(payload, 'domain', domain)
        set_param(payload, 'domain_id', domain_id)
        payload.update(record.to_params())

        envelope, _ = self._transport.post(
            Method.RECORD_CREATE, payload, RecordEnvelope
        )
        _check('create record', envelope.status)
        return envelope.record

    def get(self, domain, domain_id, record_id: int) -> Record:
        record_id = int(record_id)
        if record_id <= 0:
            raise ValueError(f'invalid record_id {record_id}')

        payload = self._transport.payload()
        set_param(payload, 'domain', domain)
        set_param(payload, 'domain_id', domain_id)
        payload['record_id'] = str(record_id)

        envelope, _ = self._transport.post(
            Method.RECORD_INFO, payload, RecordEnvelope
        )
        _check('get record', envelope.status)
        return envelope.record

    def update(
        self, domain_id, domain, record_id, record: Record
    ) -> RecordModify:
        payload = self._transport.payload()
        set_param(payload, 'domain_id', domain_id)
        set_param(payload, 'domain', domain)
        set_param(payload, 'record_id', record_id)
        payload.update(record.to_params())

        envelope, _ = self._transport.post(
            Method.RECORD_MODIFY, payload, RecordModifyEnvelope
        )
        _check('update record', envelope.status)
        return envelope.record

    def delete(self, domain_id: int, domain, record_id):
        """Remove a record and return the raw HTTP response."""
        payload = self._transport.payload()
        payload['domain_id'] = str(int(domain_id))
        set_param(payload, 'domain', domain)
        set_param(payload, 'record_id', record_id)

        envelope, response = self._transport.post(
            Method.RECORD_REMOVE, payload, RecordEnvelope
        )
        _check('delete record', envelope.status)
        return response
