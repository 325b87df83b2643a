"""Documents package.


All documents are defined in this package and inherit from the base `Document`
class in `base.py`. They are re-exported here to provide a single, convenient
import path.
"""

from .base import Document, handles
from .user import User

__all__ = ["Document", "User", "handles"]
