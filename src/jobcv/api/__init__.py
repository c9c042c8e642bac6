"""HTTP surface for the CV generator."""
from jobcv.api.server import create_app

__all__ = ["create_app"]
