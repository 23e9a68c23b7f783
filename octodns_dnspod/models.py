#
#
#

"""Entities exchanged with the DNSPod API.

Every field is optional on the wire; a missing key decodes to ``None``. The
service sends ids and counters sometimes as JSON numbers and sometimes as
strings, so scalar fields are normalised to ``str`` on the way in.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

SUCCESS_CODE = '1'


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _as_int(value: Any) -> Optional[int]:
    if value is None or value == '':
        return None
    return int(value)


def _as_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, str):
        return value.lower() in ('1', 'true', 'yes')
    return bool(value)


def _decode(cls, data: Optional[Dict], converters: Dict = None):
    converters = converters or {}
    data = data or {}
    kwargs = {}
    for f in fields(cls):
        if f.name in data:
            convert = converters.get(f.name, _as_str)
            kwargs[f.name] = convert(data[f.name])
    return cls(**kwargs)


def set_param(params: Dict[str, str], key: str, value: Any) -> None:
    # empty strings and None never reach the wire
    if value is None or value == '':
        return
    params[key] = str(value)


@dataclass
class Status:
    code: Optional[str] = None
    message: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        return _decode(cls, data)

    @property
    def ok(self) -> bool:
        return self.code == SUCCESS_CODE


@dataclass
class DomainInfo:
    """Account wide domain counters returned next to domain listings."""

    domain_total: Optional[str] = None
    all_total: Optional[str] = None
    mine_total: Optional[str] = None
    share_total: Optional[str] = None
    vip_total: Optional[str] = None
    ismark_total: Optional[str] = None
    pause_total: Optional[str] = None
    error_total: Optional[str] = None
    lock_total: Optional[str] = None
    spam_total: Optional[str] = None
    vip_expire: Optional[str] = None
    share_out_total: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        return _decode(cls, data)


@dataclass
class Domain:
    id: Optional[str] = None
    name: Optional[str] = None
    punycode: Optional[str] = None
    grade: Optional[str] = None
    grade_title: Optional[str] = None
    status: Optional[str] = None
    ext_status: Optional[str] = None
    records: Optional[str] = None
    group_id: Optional[str] = None
    is_mark: Optional[str] = None
    remark: Optional[str] = None
    is_vip: Optional[str] = None
    searchengine_push: Optional[str] = None
    user_id: Optional[str] = None
    created_on: Optional[str] = None
    updated_on: Optional[str] = None
    ttl: Optional[str] = None
    cname_speedup: Optional[str] = None
    owner: Optional[str] = None
    auth_to_anquanbao: Optional[bool] = None

    @classmethod
    def from_dict(cls, data):
        return _decode(cls, data, {'auth_to_anquanbao': _as_bool})


@dataclass
class Record:
    """A single resource record inside a domain.

    ``weight`` is the only integer field: ``None`` means "not set" while ``0``
    is a legitimate weight and is sent as such.
    """

    id: Optional[str] = None
    name: Optional[str] = None
    line: Optional[str] = None
    line_id: Optional[str] = None
    type: Optional[str] = None
    ttl: Optional[str] = None
    value: Optional[str] = None
    mx: Optional[str] = None
    enabled: Optional[str] = None
    status: Optional[str] = None
    monitor_status: Optional[str] = None
    remark: Optional[str] = None
    updated_on: Optional[str] = None
    use_aqb: Optional[str] = None
    weight: Optional[int] = None

    @classmethod
    def from_dict(cls, data):
        return _decode(cls, data, {'weight': _as_int})

    def to_params(self) -> Dict[str, str]:
        """Write fields for Record.Create and Record.Modify."""
        params = {}
        set_param(params, 'sub_domain', self.name)
        set_param(params, 'record_type', self.type)
        set_param(params, 'record_line', self.line)
        set_param(params, 'record_line_id', self.line_id)
        set_param(params, 'value', self.value)
        set_param(params, 'mx', self.mx)
        set_param(params, 'ttl', self.ttl)
        set_param(params, 'status', self.status)
        if self.weight is not None:
            params['weight'] = str(self.weight)
        return params


@dataclass
class RecordModify:
    """The reduced record echoed back by Record.Modify."""

    id: Optional[str] = None
    name: Optional[str] = None
    value: Optional[str] = None
    status: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        return _decode(cls, data)


@dataclass
class ListParams:
    """Filters for Record.List. ``domain_id`` and/or ``domain`` is required."""

    domain_id: Optional[str] = None
    domain: Optional[str] = None
    offset: Optional[str] = None
    length: Optional[str] = None
    sub_domain: Optional[str] = None
    record_type: Optional[str] = None
    record_line: Optional[str] = None
    record_line_id: Optional[str] = None
    keyword: Optional[str] = None

    def to_params(self) -> Dict[str, str]:
        params = {}
        for f in fields(self):
            set_param(params, f.name, getattr(self, f.name))
        return params
