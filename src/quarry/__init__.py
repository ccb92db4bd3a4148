"""
Quarry - async database access with composable, parameterized fetch requests.

    >>> from quarry import SQLiteConnection
    >>> async with SQLiteConnection() as cn:
    ...     rows = await cn.from_("actor").where("name = ?", ["Mark"]).fetch()
"""

__version__ = "0.1.0"

from quarry.core import *  # noqa
from quarry.core import __all__  # noqa
