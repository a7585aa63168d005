"""Tools bundled with argomatic and exposed through ``argomatic-cli``."""

from .line_counter import CountLines
from .text_walker import WalkText
from .walkers import WALKERS, CountWords, FindPattern, Walker

__all__ = ["CountLines", "WalkText", "Walker", "CountWords", "FindPattern", "WALKERS"]
