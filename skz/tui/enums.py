from enum import Enum

from skz.agents.models import Permission
from skz.install_service import OutcomeStatus


class UIStyle(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    CYAN = "cyan"
    MAGENTA = "magenta"
    DIM = "dim"
    WHITE = "white"


OUTCOME_STYLE = {
    OutcomeStatus.INSTALLED: UIStyle.GREEN.value,
    OutcomeStatus.SKIPPED: UIStyle.YELLOW.value,
    OutcomeStatus.FAILED: UIStyle.RED.value,
}

PERMISSION_STYLE = {
    Permission.ALLOW: UIStyle.GREEN.value,
    Permission.DENY: UIStyle.RED.value,
    Permission.ASK: UIStyle.YELLOW.value,
}
