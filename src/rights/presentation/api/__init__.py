"""HTTP glue for the identity core (FastAPI)."""

from rights.presentation.api.app import create_app

__all__ = ["create_app"]
