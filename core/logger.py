"""
Logging strutturato per estoque-processor.

Unifica logging colorato (colorlog) e log JSON line per le esecuzioni
della pipeline, con correlation ID per richiesta.
"""
import contextvars
import json
import logging
import sys
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import colorlog

# Context variables per tracciare richieste
_request_context: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar('request_context')


def setup_colored_logging(service_name: str = "processor", level: int = logging.INFO):
    """
    Configura logging colorato con colorlog.

    Args:
        service_name: Nome del servizio per identificare log
        level: Livello del root logger
    """
    handler = colorlog.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)

    formatter = colorlog.ColoredFormatter(
        f"%(log_color)s[%(levelname)s]%(reset)s %(cyan)s{service_name}%(reset)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        reset=True,
        log_colors={
            'DEBUG': 'white',
            'INFO': 'blue',
            'WARNING': 'yellow',
            'ERROR': 'red',
            'CRITICAL': 'red,bg_white',
        },
        secondary_log_colors={},
        style="%",
    )
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []
    root_logger.addHandler(handler)

    # Riduci verbosità librerie
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    logging.getLogger('multipart').setLevel(logging.WARNING)

    return root_logger


def set_request_context(correlation_id: Optional[str] = None):
    """
    Imposta contesto richiesta per logging strutturato.

    Args:
        correlation_id: ID correlazione (genera se None)
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    _request_context.set({"correlation_id": correlation_id})


def get_request_context() -> Dict[str, Any]:
    """Recupera contesto richiesta corrente."""
    return _request_context.get({})


def get_correlation_id() -> Optional[str]:
    return get_request_context().get("correlation_id")


def log_json(
    level: str,
    message: str,
    correlation_id: Optional[str] = None,
    file_name: Optional[str] = None,
    tipo: Optional[str] = None,
    rows_total: Optional[int] = None,
    rows_valid: Optional[int] = None,
    rows_rejected: Optional[int] = None,
    elapsed_ms: Optional[float] = None,
    decision: Optional[str] = None,
    **extra,
):
    """
    Log strutturato in formato JSON line.

    Args:
        level: 'info', 'warning', 'error', 'debug'
        message: Messaggio da loggare
        correlation_id: ID correlazione (usa contesto se None)
        file_name: Nome file processato
        tipo: Tipo batch inferito
        rows_total: Numero righe lette dal CSV
        rows_valid: Numero righe nell'upload
        rows_rejected: Numero righe scartate
        elapsed_ms: Tempo elaborazione in millisecondi
        decision: Esito pipeline (save/reject)
        **extra: Campi aggiuntivi
    """
    if correlation_id is None:
        correlation_id = get_correlation_id()

    log_data: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": level.upper(),
        "message": message,
    }

    optional_fields = {
        "correlation_id": correlation_id,
        "file_name": file_name,
        "tipo": tipo,
        "rows_total": rows_total,
        "rows_valid": rows_valid,
        "rows_rejected": rows_rejected,
        "elapsed_ms": elapsed_ms,
        "decision": decision,
    }
    log_data.update({key: value for key, value in optional_fields.items() if value is not None})
    log_data.update(extra)

    logger = logging.getLogger(__name__)
    log_func = getattr(logger, level.lower(), logger.info)
    log_func(json.dumps(log_data, ensure_ascii=False))
