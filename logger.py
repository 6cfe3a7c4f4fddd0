import logging
import sys

_configured = False


def configure_logging(log_file: str = "", level: int = logging.INFO):
    """Attach console (and optional file) handlers to the root logger once."""
    global _configured
    if _configured:
        return

    root = logging.getLogger()
    root.setLevel(level)
    fmt = logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s")

    sh = logging.StreamHandler(stream=sys.stdout)
    sh.setFormatter(fmt)
    root.addHandler(sh)

    if log_file:
        try:
            fh = logging.FileHandler(log_file, encoding="utf-8")
            fh.setFormatter(fmt)
            root.addHandler(fh)
        except OSError as e:
            root.warning("Could not open log file %s: %s", log_file, e)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
