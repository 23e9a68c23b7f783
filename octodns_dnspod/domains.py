#
#
#

"""Domain (zone) operations of the DNSPod API.

DNSPod API docs:
- https://www.dnspod.cn/docs/domains.html
- https://docs.dnspod.com/api/
"""

import logging
from dataclasses import dataclass, field
from typing import List

from .clients import Method, Transport
from .exceptions import DnspodApiError
from .models import Domain, DomainInfo, Status, set_param


@dataclass
class DomainListEnvelope:
    status: Status = field(default_factory=Status)
    info: DomainInfo = field(default_factory=DomainInfo)
    domains: List[Domain] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data):
        return cls(
            status=Status.from_dict(data.get('status')),
            info=DomainInfo.from_dict(data.get('info')),
            domains=[Domain.from_dict(d) for d in data.get('domains') or []],
        )


@dataclass
class DomainEnvelope:
    status: Status = field(default_factory=Status)
    info: DomainInfo = field(default_factory=DomainInfo)
    domain: Domain = field(default_factory=Domain)

    @classmethod
    def from_dict(cls, data):
        return cls(
            status=Status.from_dict(data.get('status')),
            info=DomainInfo.from_dict(data.get('info')),
            domain=Domain.from_dict(data.get('domain')),
        )


class DomainsService(object):
    """Domain related methods.

    Only ``list`` checks the API status code. ``create``, ``get`` and
    ``delete`` hand back whatever the service echoed; callers have to look
    at the returned :class:`Domain` (an unknown domain decodes with every
    field set to ``None``).
    """

    def __init__(self, transport: Transport):
        self._transport = transport
        self.log = logging.getLogger('DnspodClient')

    def list(self) -> List[Domain]:
        payload = self._transport.payload()

        envelope, _ = self._transport.post(
            Method.DOMAIN_LIST, payload, DomainListEnvelope
        )
        if not envelope.status.ok:
            raise DnspodApiError(
                'list domains', envelope.status.code, envelope.status.message
            )

        self.log.debug(
            'list: domains=%d, domain_total=%s',
            len(envelope.domains),
            envelope.info.domain_total,
        )
        return envelope.domains

    def create(self, domain: Domain) -> Domain:
        if not domain.name:
            raise ValueError('domain name is required')
        payload = self._transport.payload()
        set_param(payload, 'domain', domain.name)
        set_param(payload, 'group_id', domain.group_id)
        set_param(payload, 'is_mark', domain.is_mark)

        envelope, _ = self._transport.post(
            Method.DOMAIN_CREATE, payload, DomainEnvelope
        )
        return envelope.domain

    def get(self, id, name) -> Domain:
        payload = self._transport.payload()
        set_param(payload, 'domain_id', id)
        set_param(payload, 'domain', name)

        envelope, _ = self._transport.post(
            Method.DOMAIN_INFO, payload, DomainEnvelope
        )
        return envelope.domain

    def delete(self, id, name):
        """Remove a domain and return the raw HTTP response."""
        payload = self._transport.payload()
        set_param(payload, 'domain_id', id)
        set_param(payload, 'domain', name)

        _, response = self._transport.post(
            Method.DOMAIN_REMOVE, payload, DomainEnvelope
        )
        return response
