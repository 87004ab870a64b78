"""
Service layer: validation, business rules and error translation.

Services take request schemas, call the repositories, and return
response dicts ready for the JSON envelope.  Every failure is raised as
an ``helpdesk.errors.AppError``.
"""
