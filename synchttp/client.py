#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from typing import Optional

from .connection import Connector
from .request import Request


def get(url: str, connector: Optional[Connector] = None) -> Request:
    return Request('GET', url, connector)


def post(url: str, connector: Optional[Connector] = None) -> Request:
    return Request('POST', url, connector)


def put(url: str, connector: Optional[Connector] = None) -> Request:
    return Request('PUT', url, connector)


def delete(url: str, connector: Optional[Connector] = None) -> Request:
    return Request('DELETE', url, connector)


__all__ = ['get', 'post', 'put', 'delete']
