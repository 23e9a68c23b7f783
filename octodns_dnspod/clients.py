#
#
#

"""Protocol definitions for the DNSPod transport.

The services in :mod:`octodns_dnspod.domains` and
:mod:`octodns_dnspod.records` only need something that conforms to
:class:`Transport`; :class:`octodns_dnspod.dnsapi_client.DnspodClient` is the
HTTP implementation, tests use lightweight stubs.
"""

from enum import Enum
from typing import Dict, Protocol, Tuple, Type, TypeVar

from requests import Response

E = TypeVar('E')


class Method(str, Enum):
    """Remote method names. DNSPod addresses calls by name, not by path."""

    DOMAIN_LIST = 'Domain.List'
    DOMAIN_CREATE = 'Domain.Create'
    DOMAIN_INFO = 'Domain.Info'
    DOMAIN_REMOVE = 'Domain.Remove'
    RECORD_LIST = 'Record.List'
    RECORD_CREATE = 'Record.Create'
    RECORD_INFO = 'Record.Info'
    RECORD_MODIFY = 'Record.Modify'
    RECORD_REMOVE = 'Record.Remove'


class Transport(Protocol):
    """Protocol defining what the services expect from a transport."""

    def payload(self) -> Dict[str, str]:
        """Return a fresh, mutable copy of the common request parameters.

        Returns:
            Dict holding authentication and format fields
        """
        ...

    def post(
        self, method: Method, payload: Dict[str, str], envelope: Type[E]
    ) -> Tuple[E, Response]:
        """Call a remote method and decode its response.

        Args:
            method: Remote method to invoke
            payload: Form fields, common parameters included
            envelope: Class whose ``from_dict`` decodes the JSON body

        Returns:
            Tuple of the decoded envelope and the HTTP response

        Raises:
            DnspodClientException: On HTTP 401/404 or an undecodable body
            requests.RequestException: On any other transport failure
        """
        ...
