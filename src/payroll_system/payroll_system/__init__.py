"""Payroll System package.

Feature modules (attendance, policies, timesheets, adjustments, advances, payroll)
with a thin Flask controller layer over service/repository layers. The monthly
salary computation lives in ``payroll.calculator`` and is pure: every input is an
explicit record and every output a structured result.
"""
