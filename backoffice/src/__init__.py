"""Back-office service package.

Provides the generic entity repository layer, the request validation
pipeline, the domain services built on top of them and a thin FastAPI
boundary.
"""

__version__ = "0.1.0"
