# -*- coding: utf-8 -*-
"""Health records domain."""
