"""Notification package.

Writes administrator notifications to the ``notifications`` table and
renders/sends the cancellation email delivered by the background worker.
"""
