from .utils import Change, ChangeType, SyncReport
from .state import State
from .reconciler import resolve
from .executor import ChangeExecutor

__all__ = ["Change", "ChangeType", "SyncReport", "State", "resolve", "ChangeExecutor"]
