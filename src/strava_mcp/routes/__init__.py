from .misc import make_misc_blueprint
from .tools import make_tools_blueprint

__all__ = [
    "make_misc_blueprint",
    "make_tools_blueprint",
]
