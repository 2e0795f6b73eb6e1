"""
JSON logging for the Lambda entry point, the CLI and the pipeline runs.

Every event is stamped with the service name and deployment env, so lines from
module-level loggers (pipeline.strategy.done, pipeline.report.done) can be
filtered the same way as the handler's request.* / response.* events.
"""

from __future__ import annotations
import logging
import os
import sys
from typing import Any, Dict, Optional

import structlog

SERVICE_NAME = os.getenv("SERVICE_NAME", "RotationAdvisor")


def add_service_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """structlog processor: fill in service/env unless the event already carries them."""
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("env", os.getenv("ENV", "dev"))
    return event_dict


def configure_logging(level: Optional[str] = None):
    """
    Route structlog through stdlib logging on stdout and render one JSON object per line.

    parameters:
    - level: str | None – overrides LOG_LEVEL (default INFO).

    returns:
    - structlog.BoundLogger – bound with service and env.

    example line:
    {"event": "response.success", "latency_ms": 4.2, "run_id": "a1b2c3d4-20261018130000",
     "service": "RotationAdvisor", "env": "dev", "timestamp": "...", "level": "info"}
    """
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(format="%(message)s", stream=sys.stdout,
                        level=getattr(logging, level_name, logging.INFO))

    structlog.configure(
        processors=[
            add_service_context,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger().bind(service=SERVICE_NAME, env=os.getenv("ENV", "dev"))
