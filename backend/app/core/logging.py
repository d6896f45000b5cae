import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format=LOG_FORMAT,
)

# Quieten per-request client logs
logging.getLogger("httpx").setLevel(logging.WARNING)
