"""Timeclock package.

Employee time tracking and PTO requests, organized by feature modules
(users, time_entries, pto, reports) with a thin Flask JSON controller layer
over service/repository layers.
"""
