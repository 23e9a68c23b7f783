#
#
#

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from requests import Session

from octodns import __VERSION__ as octodns_version

from . import __version__ as package_version
from .domains import DomainsService
from .exceptions import (
    DnspodClientDecodeError,
    DnspodClientNotFound,
    DnspodClientUnauthorized,
)
from .records import RecordsService


@dataclass(frozen=True)
class CommonParams:
    """Fields merged into every request."""

    login_token: str
    format: str = 'json'
    lang: Optional[str] = None
    error_on_empty: Optional[str] = None
    user_id: Optional[str] = None

    def to_payload(self) -> Dict[str, str]:
        payload = {'login_token': self.login_token, 'format': self.format}
        if self.lang:
            payload['lang'] = self.lang
        if self.error_on_empty:
            payload['error_on_empty'] = self.error_on_empty
        if self.user_id:
            payload['user_id'] = self.user_id
        return payload


class DnspodClient(object):
    BASE_URL = 'https://dnsapi.cn/'

    def __init__(
        self,
        login_token,
        lang=None,
        error_on_empty='no',
        user_id=None,
        base_url=None,
        timeout=None,
    ):
        self.log = logging.getLogger('DnspodClient')
        self.common_params = CommonParams(
            login_token=login_token,
            lang=lang,
            error_on_empty=error_on_empty,
            user_id=user_id,
        )
        self.base_url = base_url or self.BASE_URL
        if not self.base_url.endswith('/'):
            self.base_url = f'{self.base_url}/'
        self.timeout = timeout

        session = Session()
        session.headers.update(
            {
                'Accept': 'application/json',
                'User-Agent': f'octodns/{octodns_version} octodns-dnspod/{package_version}',
            }
        )
        self._session = session

        self.domains = DomainsService(self)
        self.records = RecordsService(self)

    def payload(self):
        return self.common_params.to_payload()

    def _do(self, method, payload):
        url = f'{self.base_url}{method}'
        response = self._session.request(
            'POST', url, data=payload, timeout=self.timeout
        )
        if response.status_code == 401:
            raise DnspodClientUnauthorized()
        if response.status_code == 404:
            raise DnspodClientNotFound()
        response.raise_for_status()
        return response

    def post(self, method, payload, envelope):
        method = getattr(method, 'value', method)
        self.log.debug(
            'post: method=%s, fields=%s', method, _field_names(payload)
        )
        response = self._do(method, payload)
        try:
            data = response.json()
        except ValueError as e:
            raise DnspodClientDecodeError(method) from e
        if not isinstance(data, dict):
            raise DnspodClientDecodeError(method)
        try:
            return envelope.from_dict(data), response
        except (AttributeError, TypeError, ValueError) as e:
            # a JSON object, but not shaped like the envelope
            raise DnspodClientDecodeError(method) from e


def _field_names(payload):
    return sorted(k for k in payload if k != 'login_token')
