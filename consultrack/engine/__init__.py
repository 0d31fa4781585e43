"""Engagement rule engine.

Deadline policy, commission calculation, filtering, statistics and
lifecycle transitions. Every function here is pure and synchronous:
no shared state, safe to call from concurrent requests.
"""
