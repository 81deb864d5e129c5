# -*- coding: utf-8 -*-
"""Vaccination schedules domain."""
