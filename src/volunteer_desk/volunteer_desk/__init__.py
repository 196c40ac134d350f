"""Volunteer Desk package.

Feature modules (events, positions, signups, attendance, messages, realtime)
each keep a thin Flask controller on top of service/repository layers.
"""
