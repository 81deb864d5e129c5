# -*- coding: utf-8 -*-
"""Health stats domain (score, insights, dashboard).

Read-only: everything here is recomputed from records, vaccinations and
reminders on each call.
"""
