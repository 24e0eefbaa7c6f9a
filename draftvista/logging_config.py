"""
Logging setup shared by the API server, the CLI and the Streamlit app.

Modules log through ``logging.getLogger(__name__)``; entry points call
``setup_logging`` once.
"""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a console handler to the ``draftvista`` logger.

    Calling it again only updates the level, so Streamlit reruns do not stack handlers.
    """
    logger = logging.getLogger("draftvista")
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    if not logger.handlers:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(console)

    return logger
