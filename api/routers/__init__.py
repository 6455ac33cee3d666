"""
Routers per API estoque-processor.

Moduli:
- uploads: ingest file e mutazioni dello store (POST/DELETE /api/uploads)
- reports: aggregazioni per upload e palette (GET /api/uploads/{index}/*)
"""
from . import reports, uploads

__all__ = ["uploads", "reports"]
