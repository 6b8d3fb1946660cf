import os
from dotenv import load_dotenv

from .utils.constants import DEFAULT_GROK_MODEL, DEFAULT_SEARCH_LIMIT, GROK_API_BASE_URL

load_dotenv()


class Config:
    GROK_API_KEY = os.getenv("GROK_API_KEY")
    GROK_MODEL = os.getenv("GROK_MODEL", DEFAULT_GROK_MODEL)
    GROK_BASE_URL = os.getenv("GROK_BASE_URL", GROK_API_BASE_URL)
    DEFAULT_SEARCH_LIMIT = int(os.getenv("DEFAULT_SEARCH_LIMIT", str(DEFAULT_SEARCH_LIMIT)))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "info")

    @classmethod
    def validate(cls):
        if not cls.GROK_API_KEY or not cls.GROK_API_KEY.strip():
            raise ValueError("GROK_API_KEY is missing. Please set GROK_API_KEY in your .env file")


config = Config()
