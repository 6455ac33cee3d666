import logging

import uvicorn
from dotenv import load_dotenv

# Carica variabili ambiente
load_dotenv()

# Configurazione logging colorato PRIMA di qualsiasi altro import che usa logging
from core.logger import setup_colored_logging
setup_colored_logging("processor")

from core.config import get_config

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    config = get_config()

    logger.info(f"Starting {config.processor_name} on {config.host}:{config.port}")
    logger.info(f"Storage backend: {config.storage_backend}")

    try:
        # Un solo worker: lo UploadStore è stato process-wide
        uvicorn.run(
            "api.main:app",
            host=config.host,
            port=config.port,
            workers=1,
            reload=False,
            log_level="info",
            access_log=True,
            use_colors=False,  # usiamo colorlog
        )
    except Exception as e:
        logger.error(f"Failed to start server: {e}")
        raise
