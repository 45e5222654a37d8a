from skz.tui.renderers import SkzConsoleUI

__all__ = ["SkzConsoleUI"]
