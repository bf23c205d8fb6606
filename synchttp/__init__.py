#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from .client import *
from .connection import *
from .decoder import *
from .exc import *
from .headers import *
from .request import *
from .response import *
