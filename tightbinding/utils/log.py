import logging


def setup_logging(level=logging.INFO, fmt: str = "%(asctime)s %(name)s %(levelname)s: %(message)s") -> None:
    """Configure root logging for scripts; the library itself never calls this."""
    logging.basicConfig(level=level, format=fmt)
