# Import models here so Base.metadata knows every table
from .base import Base  # noqa: F401
from .user import User  # noqa: F401
from .category import Category  # noqa: F401
from .status import Status  # noqa: F401
from .task import Task  # noqa: F401
