#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from datetime import datetime
from email.utils import parsedate_to_datetime
from enum import Enum
from typing import Callable, Dict, Iterator, List, NamedTuple, Optional, Tuple
from urllib.parse import urlsplit

from .exc import AmbiguousHeader, ImmutableHeaders, UnsupportedOperation

ACCEPT_CHARSET = 'accept-charset'
ACCEPT_ENCODING = 'accept-encoding'
CONNECTION = 'connection'
CONTENT_LENGTH = 'content-length'
CONTENT_TYPE = 'content-type'
HOST = 'host'
DATE = 'date'
EXPIRES = 'expires'
IF_MODIFIED_SINCE = 'if-modified-since'
TRANSFER_ENCODING = 'transfer-encoding'
PERSISTENT_CONNECTION = 'persistent-connection'

# for_each() visits the pseudo-headers in this order
PSEUDO_HEADERS = (ACCEPT_CHARSET, ACCEPT_ENCODING, CONNECTION, CONTENT_LENGTH, CONTENT_TYPE, HOST,
                  DATE, EXPIRES, IF_MODIFIED_SINCE, TRANSFER_ENCODING, PERSISTENT_CONNECTION)


def normalize(name: str) -> str:
    return name.strip().lower()


class HeaderMap(object):
    def __init__(self):
        self._values: Dict[str, List[str]] = {}

    def get(self, name: str) -> Optional[List[str]]:
        values = self._values.get(normalize(name))
        return list(values) if values else None

    def add(self, name: str, value: str):
        self._values.setdefault(normalize(name), []).append(value)

    def remove(self, name: str, value: str):
        name = normalize(name)
        values = self._values.get(name)
        if values and value in values:
            values.remove(value)
            if not values:
                del self._values[name]

    def remove_all(self, name: str):
        self._values.pop(normalize(name), None)

    def set(self, name: str, value: str):
        self._values[normalize(name)] = [value]

    def clear(self):
        self._values.clear()

    def names(self) -> List[str]:
        return list(self._values)

    def __contains__(self, name):
        return normalize(name) in self._values

    def __len__(self):
        return len(self._values)

    def __str__(self):
        return f'HeaderMap{{{self._values}}}'


class Access(Enum):
    FIXED = 'fixed'
    DERIVED = 'derived'
    SETTABLE = 'settable'
    UNSUPPORTED = 'unsupported'


class PseudoHeader(NamedTuple):
    read: Callable[['Headers'], Optional[List[str]]]
    access: Access


def _constant(value: str) -> PseudoHeader:
    return PseudoHeader(lambda headers: [value], Access.FIXED)


def _absent(headers: 'Headers') -> None:
    return None


UNSUPPORTED = PseudoHeader(_absent, Access.UNSUPPORTED)


def _assigned(name: str) -> PseudoHeader:
    return PseudoHeader(lambda headers: headers.assigned.get(name), Access.SETTABLE)


def _stored(name: str) -> PseudoHeader:
    return PseudoHeader(lambda headers: headers.fields.get(name), Access.DERIVED)


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _parse_date(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None


def authority(host: str, port: int) -> str:
    # IPv6 literals keep their brackets
    if ':' in host:
        host = f'[{host}]'
    return f'{host}:{port}'


def _split_host(value: Optional[str]):
    if value is None:
        return None
    try:
        return urlsplit(f'//{value}')
    except ValueError:
        return None


class Headers(object):
    """Header view with computed pseudo-headers; immutable views reject every mutation."""

    def __init__(self, pseudo: Dict[str, PseudoHeader], fields: HeaderMap = None, mutable: bool = True):
        self._pseudo = pseudo
        self.fields = fields if fields is not None else HeaderMap()
        self.assigned = HeaderMap()
        self.mutable = mutable

    @classmethod
    def for_request(cls, request) -> 'Headers':
        pseudo = {name: UNSUPPORTED for name in PSEUDO_HEADERS}
        pseudo.update({
            ACCEPT_CHARSET: _constant('utf-8'),
            ACCEPT_ENCODING: _constant('identity'),
            CONNECTION: _constant('close'),
            CONTENT_LENGTH: PseudoHeader(
                lambda headers: [str(request.content_length)] if request.has_body else None, Access.DERIVED),
            CONTENT_TYPE: _assigned(CONTENT_TYPE),
            HOST: PseudoHeader(lambda headers: [authority(request.host, request.port)], Access.DERIVED),
        })
        return cls(pseudo)

    @classmethod
    def for_response(cls, fields: HeaderMap) -> 'Headers':
        return cls({name: _stored(name) for name in PSEUDO_HEADERS}, fields, mutable=False)

    def get(self, name: str) -> Optional[List[str]]:
        name = normalize(name)
        pseudo = self._pseudo.get(name)
        if pseudo is not None:
            return pseudo.read(self)
        return self.fields.get(name)

    def value(self, name: str) -> Optional[str]:
        values = self.get(name)
        if not values:
            return None
        if len(values) > 1:
            raise AmbiguousHeader(normalize(name))
        return values[0]

    def add(self, name: str, value):
        name = normalize(name)
        if self._check_writable(name) is not None:
            # settable pseudo-headers hold a single value
            self.assigned.set(name, str(value))
        else:
            self.fields.add(name, str(value))

    def remove(self, name: str, value):
        name = normalize(name)
        if self._check_writable(name) is not None:
            self.assigned.remove(name, str(value))
        else:
            self.fields.remove(name, str(value))

    def remove_all(self, name: str):
        name = normalize(name)
        if self._check_writable(name) is not None:
            self.assigned.remove_all(name)
        else:
            self.fields.remove_all(name)

    def set(self, name: str, value):
        self.remove_all(name)
        self.add(name, value)

    def clear(self):
        if not self.mutable:
            raise ImmutableHeaders()
        self.assigned.clear()
        self.fields.clear()

    def items(self) -> Iterator[Tuple[str, List[str]]]:
        for name in self._pseudo:
            values = self.get(name)
            if values:
                yield name, values
        for name in self.fields.names():
            if name not in self._pseudo:
                yield name, self.fields.get(name)

    def for_each(self, visit: Callable[[str, List[str]], None]):
        for name, values in self.items():
            visit(name, values)

    def _check_writable(self, name: str) -> Optional[PseudoHeader]:
        if not self.mutable:
            raise ImmutableHeaders()
        pseudo = self._pseudo.get(name)
        if pseudo is None:
            return None
        if pseudo.access is Access.FIXED:
            raise UnsupportedOperation(f'{name} is always {pseudo.read(self)[0]}')
        if pseudo.access is Access.DERIVED:
            raise UnsupportedOperation(f'{name} is automatically set')
        if pseudo.access is Access.UNSUPPORTED:
            raise UnsupportedOperation(f'{name} is unsupported')
        return pseudo

    @property
    def content_length(self) -> Optional[int]:
        return _parse_int(self.value(CONTENT_LENGTH))

    @content_length.setter
    def content_length(self, value: int):
        self.set(CONTENT_LENGTH, value)

    @property
    def content_type(self) -> Optional[str]:
        return self.value(CONTENT_TYPE)

    @content_type.setter
    def content_type(self, value: Optional[str]):
        if value is None:
            self.remove_all(CONTENT_TYPE)
        else:
            self.set(CONTENT_TYPE, value)

    @property
    def host(self) -> Optional[str]:
        parts = _split_host(self.value(HOST))
        return parts.hostname if parts is not None else None

    @host.setter
    def host(self, value: str):
        self.set(HOST, value)

    @property
    def port(self) -> Optional[int]:
        parts = _split_host(self.value(HOST))
        try:
            return parts.port if parts is not None else None
        except ValueError:
            return None

    @port.setter
    def port(self, value: int):
        self.set(HOST, value)

    @property
    def date(self) -> Optional[datetime]:
        return _parse_date(self.value(DATE))

    @date.setter
    def date(self, value: datetime):
        self.set(DATE, value)

    @property
    def expires(self) -> Optional[datetime]:
        return _parse_date(self.value(EXPIRES))

    @expires.setter
    def expires(self, value: datetime):
        self.set(EXPIRES, value)

    @property
    def if_modified_since(self) -> Optional[datetime]:
        return _parse_date(self.value(IF_MODIFIED_SINCE))

    @if_modified_since.setter
    def if_modified_since(self, value: datetime):
        self.set(IF_MODIFIED_SINCE, value)

    @property
    def chunked_transfer_encoding(self) -> bool:
        values = self.get(TRANSFER_ENCODING) or []
        return any('chunked' in value.lower() for value in values)

    @chunked_transfer_encoding.setter
    def chunked_transfer_encoding(self, value: bool):
        self.set(TRANSFER_ENCODING, 'chunked' if value else 'identity')

    @property
    def persistent_connection(self) -> bool:
        return False

    @persistent_connection.setter
    def persistent_connection(self, value: bool):
        self.set(PERSISTENT_CONNECTION, value)

    def __contains__(self, name):
        return bool(self.get(name))

    def __iter__(self):
        return iter(name for name, _ in self.items())

    def __str__(self):
        return f'Headers{{{dict(self.items())}}}'


__all__ = ['authority', 'HeaderMap', 'Headers', 'Access', 'PseudoHeader', 'PSEUDO_HEADERS', 'normalize']
