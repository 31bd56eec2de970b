"""System-tray icon setup via pystray."""

from typing import Callable

import pystray
from PIL import Image
from pystray import MenuItem, Menu

from selection import SelectionMode

_MODE_LABELS = {
    SelectionMode.SINGLE: "Single date",
    SelectionMode.MULTIPLE: "Multiple dates",
    SelectionMode.RANGE: "Date range",
    SelectionMode.RANGE_ON_TWO_SCREENS: "Range (two views)",
}


def _mode_items(
    current_mode: Callable[[], SelectionMode],
    on_mode: Callable[[SelectionMode], None],
) -> list[MenuItem]:
    def item(mode: SelectionMode) -> MenuItem:
        return MenuItem(
            _MODE_LABELS[mode],
            lambda _icon, _item: on_mode(mode),
            checked=lambda _item: current_mode() is mode,
            radio=True,
        )
    return [item(m) for m in SelectionMode]


def create_tray(
    icon_image: Image.Image,
    on_show: Callable[[], None],
    on_exit: Callable[[], None],
    current_mode: Callable[[], SelectionMode],
    on_mode: Callable[[SelectionMode], None],
    on_clear: Callable[[], None],
    on_settings: Callable[[], None] | None = None,
) -> pystray.Icon:
    """Build and return a pystray Icon (not yet started)."""
    items: list[MenuItem | Menu] = [
        MenuItem("Show Calendar", lambda _icon, _item: on_show(), default=True),
        MenuItem("Selection Mode", Menu(*_mode_items(current_mode, on_mode))),
        MenuItem("Clear Selection", lambda _icon, _item: on_clear()),
    ]
    if on_settings is not None:
        items.append(MenuItem("Settings", lambda _icon, _item: on_settings()))
    items.append(Menu.SEPARATOR)
    items.append(MenuItem("Exit", lambda _icon, _item: on_exit()))
    return pystray.Icon("mini-calendar-picker", icon_image, "Mini Calendar Picker", Menu(*items))
