"""HR system package.

Organized by feature modules (attendance, leave, payroll, reports, ...) with a
thin Flask controller layer over service/repository layers.
"""
