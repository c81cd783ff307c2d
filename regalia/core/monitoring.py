# Regalia catalogue monitoring configuration
# Prometheus metrics and logging setup

import logging
import logging.handlers
import os
import time
from contextlib import contextmanager
from typing import Iterator

from prometheus_client import Counter, Histogram

from .config import settings

# Catalogue query metrics
catalog_query_count = Counter(
    'catalog_queries_total', 'Total catalogue queries', ['operation', 'outcome']
)
catalog_query_duration = Histogram(
    'catalog_query_duration_seconds', 'Catalogue query duration', ['operation']
)
catalog_cache_hits = Counter('catalog_cache_hits_total', 'Catalogue listings served from cache')

def setup_logging():
    """Configure logging for the application"""

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers = [console_handler]

    # File handler with rotation
    if settings.LOG_FILE:
        log_dir = os.path.dirname(settings.LOG_FILE)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            settings.LOG_FILE,
            maxBytes=settings.LOG_MAX_BYTES,
            backupCount=settings.LOG_BACKUP_COUNT
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # Configure root logger
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        handlers=handlers,
        force=True
    )

    # Quiet noisy libraries
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DATABASE_ECHO else logging.WARNING
    )

@contextmanager
def track_query(operation: str) -> Iterator[None]:
    """Time a catalogue query and count its outcome"""
    start_time = time.perf_counter()
    try:
        yield
    except Exception:
        catalog_query_count.labels(operation=operation, outcome="error").inc()
        raise
    else:
        catalog_query_count.labels(operation=operation, outcome="ok").inc()
    finally:
        catalog_query_duration.labels(operation=operation).observe(
            time.perf_counter() - start_time
        )
