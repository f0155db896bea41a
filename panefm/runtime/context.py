"""Application context passed explicitly to every command."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from ..directory_model import SortRule
from ..fileops import OperationHandle, PasteOptions, PendingOperation, ProgressInfo
from .navigation import ChangeDir
from .tab import Tab


@dataclass
class AppContext:
    """Tabs, the one pending cut/copy, the one in-flight worker, and status text."""

    tabs: list[Tab]
    sort_rule: SortRule = SortRule()
    paste_options: PasteOptions = PasteOptions()
    pending: PendingOperation = field(default_factory=PendingOperation)
    tab_index: int = 0
    active_operation: OperationHandle | None = None
    loading_progress: ProgressInfo | None = None
    status_message: str = ""
    status_is_error: bool = False
    dirty: bool = True
    change_dir: ChangeDir = os.chdir

    @property
    def curr_tab(self) -> Tab:
        return self.tabs[self.tab_index]

    @property
    def curr_path(self) -> Path:
        return self.curr_tab.curr_path

    def set_status(self, message: str, *, error: bool = False) -> None:
        self.status_message = message
        self.status_is_error = error
        self.dirty = True

    def clear_status(self) -> None:
        self.set_status("")


__all__ = ["AppContext"]
