"""Weekly Timesheet Tracker package.

This package is organized by feature modules (users, timesheets) with a thin
Flask controller layer over service/repository layers.
"""
