"""Runtime configuration defaults for storage, pricing and logging."""

from __future__ import annotations

import os
from decimal import Decimal

# "memory" keeps everything for the lifetime of the process, "sqlite" writes to DB_PATH.
STORAGE_BACKEND = os.environ.get("CAMPUS_EATS_STORAGE", "memory")
DB_PATH = os.environ.get("CAMPUS_EATS_DB_PATH", "data/campus_eats.db")

DEFAULT_PRICING = os.environ.get("CAMPUS_EATS_PRICING", "simple")
COMBO_MIN_QUANTITY = 3
COMBO_DISCOUNT_RATE = Decimal("0.10")

PICKUP_LEAD_MINUTES = 30

LOG_PATH = os.environ.get("CAMPUS_EATS_LOG_PATH", "logs/campus_eats.log")
LOG_LEVEL = os.environ.get("CAMPUS_EATS_LOG_LEVEL", "INFO")
