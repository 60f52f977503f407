"""
Logging setup for applications embedding LingPDF.
"""
import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: int = logging.INFO) -> None:
    """Install a root handler. The library itself never configures logging."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
