"""
Core functionality per estoque-processor.

Questo modulo contiene:
- Configurazione (config.py)
- Errori della pipeline (errors.py)
- Logging (logger.py)
- Persistenza del blob upload (persistence.py)
- Upload store (upload_store.py)
"""
