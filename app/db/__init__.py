from .base import Base
from .models.client import Client  # Registers clients table
from .models.invoice import Invoice  # Registers invoices table
from .models.cache import (
    CacheEntry,
)  # Registers CacheEntry table (if CACHE_TYPE=database)
