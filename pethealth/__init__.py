# -*- coding: utf-8 -*-
"""Pet health tracking backend.

Domains: health records / vaccinations / reminders / stats (health score).
"""
