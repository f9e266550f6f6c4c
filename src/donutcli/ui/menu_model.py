"""Data model for selection menus."""

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple


@dataclass(frozen=True)
class MenuItem:
    """One row of a menu."""
    key: str
    label: str
    description: Optional[str] = None
    shortcut: Optional[str] = None
    disabled: bool = False
    separator: bool = False
    icon: Optional[str] = None

    @property
    def selectable(self) -> bool:
        return not self.separator and not self.disabled

    @classmethod
    def separator_line(cls, key: str = "---") -> "MenuItem":
        return cls(key=key, label="", separator=True)


@dataclass(frozen=True)
class MenuOptions:
    """
    Configuration of one menu invocation.

    ``allow_cancel`` controls what Escape / Ctrl+C do. When True they resolve
    the menu as cancelled. When False they terminate the process with
    ``SystemExit(0)`` once the terminal has been restored; callers that need
    a graceful way out must leave it True.

    ``max_visible`` limits how many item rows are drawn at once; the window
    follows the selection.
    """
    items: Tuple[MenuItem, ...]
    title: Optional[str] = None
    selected_index: int = 0
    allow_cancel: bool = True
    border: str = "single"
    show_descriptions: bool = True
    width: Optional[int] = None
    max_visible: Optional[int] = None

    def __post_init__(self):
        # Accept any sequence but keep the items immutable for the menu's lifetime.
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))
        if self.max_visible is not None and self.max_visible < 1:
            raise ValueError("max_visible must be at least 1")

    def selectable_indices(self) -> Tuple[int, ...]:
        return tuple(idx for idx, item in enumerate(self.items) if item.selectable)


@dataclass(frozen=True)
class MenuResult:
    """Final outcome of a menu: the chosen key, or a cancellation."""
    key: Optional[str]
    index: int
    cancelled: bool

    @classmethod
    def cancelled_result(cls) -> "MenuResult":
        return cls(key=None, index=-1, cancelled=True)


@dataclass
class MenuState:
    """Cursor bookkeeping while a menu is listening for keys."""
    selected_index: int
    selectable: Sequence[int] = field(default_factory=tuple)
    raw_mode_acquired: bool = False

    @property
    def position(self) -> int:
        return self.selectable.index(self.selected_index)

    def move_up(self) -> bool:
        """Step to the previous selectable entry. Returns False at the top."""
        pos = self.position
        if pos == 0:
            return False
        self.selected_index = self.selectable[pos - 1]
        return True

    def move_down(self) -> bool:
        """Step to the next selectable entry. Returns False at the bottom."""
        pos = self.position
        if pos >= len(self.selectable) - 1:
            return False
        self.selected_index = self.selectable[pos + 1]
        return True
