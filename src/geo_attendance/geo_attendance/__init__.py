"""Geo Attendance package.

Feature modules (attendance, validation, approvals, payroll, ...) sit behind a
thin Flask JSON layer; the geofence and scoring engine under ``geo`` and
``validation`` is pure and has no I/O of its own.
"""
