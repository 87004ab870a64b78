"""
Request and response schemas.

Each module pairs the request dataclasses for one feature (bound from
JSON bodies or query strings, with a ``validate()`` method) with the
functions that map models to the camelCase response dictionaries.
"""
