import os

os.environ.setdefault("VALID_CUSTOMER_IDS", "0000")
os.environ.setdefault("RANDOM_SEED", "1234")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fake_counter import config  # noqa: E402
from fake_counter import engine  # noqa: E402

config.get_settings.cache_clear()
engine.get_engine.cache_clear()
