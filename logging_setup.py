import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def setup_logging(level=None):
    """
    Configure the root logger once.
    Level precedence:
      - explicit `level` arg
      - env / secrets LOG_LEVEL (DEBUG/INFO/WARNING/ERROR)
      - default INFO
    """
    global _configured
    if _configured:  # streamlit reruns the script
        return

    from config import LOG_LEVEL

    lvl_name = str(level or LOG_LEVEL or "INFO").upper()
    lvl = getattr(logging, lvl_name, None)
    if not isinstance(lvl, int):
        lvl = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(lvl)
    _configured = True

