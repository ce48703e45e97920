"""Process-wide logging configuration."""

import logging


class HealthCheckFilter(logging.Filter):
    """Drop access-log lines for ``/health`` so probes from orchestrators stay quiet."""

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        return "/health" not in msg


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger and silence health-check access lines.

    Args:
        level: Name of the minimum level to emit, case-insensitive.
    """
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logging.getLogger("uvicorn.access").addFilter(HealthCheckFilter())
