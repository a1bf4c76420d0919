"""Timesheet Portal package.

Feature modules (users, schedules, timesheets, external) each expose a thin
Flask controller over service and repository layers. Authorization decisions
live in ``auth.gate``; persistence is raw SQL against MySQL.
"""
