#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from loguru import logger

import sys

from .config import LOG_LEVEL

if LOG_LEVEL:
    logger.add(sys.stderr, level=LOG_LEVEL.upper(), filter=__package__)
else:
    # library records stay silent until the application opts in
    logger.disable(__package__)

__all__ = ['logger']
