import logging
from rich.logging import RichHandler

def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Route log records through rich. At DEBUG the device modules log every line
    sent ("->") and received ("<-"); markup is off so SCPI text such as
    "[1]" is printed as-is.
    """
    handler = RichHandler(rich_tracebacks=True, show_path=False, markup=False)
    logging.basicConfig(level=level.upper(), format="%(message)s", datefmt="[%X]", handlers=[handler])
    log = logging.getLogger("lxi_client")
    log.setLevel(level.upper())
    return log
