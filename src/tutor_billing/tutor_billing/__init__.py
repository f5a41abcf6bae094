"""Tutor Billing package.

Feature modules (students, billing, payments, reports) follow the same layering:
frozen dataclass models, Protocol repositories with MySQL and in-memory
implementations, services holding the business rules, and thin Flask controllers.
"""
