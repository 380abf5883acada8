import os
import logging

from dotenv import load_dotenv

load_dotenv()

DEFAULT_CONDITION = os.getenv("ODATA_FILTER_DEFAULT_CONDITION", "and").strip().lower()
FILTER_KEYWORD = os.getenv("ODATA_FILTER_KEYWORD", "$filter")
LOG_LEVEL = os.getenv("ODATA_FILTER_LOG_LEVEL", "WARNING").upper()

if not isinstance(logging.getLevelName(LOG_LEVEL), int):
    LOG_LEVEL = "WARNING"

logging.getLogger("odata_filter").setLevel(LOG_LEVEL)
