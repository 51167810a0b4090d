from typing import Optional

from api.backend import BackendAPI
from storage.base import BucketStore

# Global instances initialized at startup
store: Optional[BucketStore] = None
backend: Optional[BackendAPI] = None
