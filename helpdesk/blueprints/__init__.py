"""HTTP blueprints; each feature registers its routes under ``/api/v1``."""
