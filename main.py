"""Entry point: glues pystray (daemon thread) with tkinter (main thread)."""

import logging
import threading
from datetime import date

from calendar_window import CalendarWindow
from icon_gen import create_icon_image
from selection import SelectionMode
from tray_icon import create_tray


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cal_win = CalendarWindow()
    picker = cal_win.picker

    def refresh_icon() -> None:
        selected = picker.selected_date
        tray.icon = create_icon_image(selected, selected=selected is not None)

    picker.on_date_selected = lambda _d: refresh_icon()
    picker.on_date_unselected = lambda _d: refresh_icon()

    # Callbacks marshalled onto the tkinter main thread
    def on_show() -> None:
        cal_win.root.after(0, cal_win.toggle)

    def on_exit() -> None:
        def _quit() -> None:
            tray.stop()
            cal_win.root.destroy()
        cal_win.root.after(0, _quit)

    def on_mode(mode: SelectionMode) -> None:
        def _apply() -> None:
            cal_win.set_mode(mode)
            refresh_icon()
        cal_win.root.after(0, _apply)

    def on_clear() -> None:
        def _apply() -> None:
            cal_win.clear_selection()
            refresh_icon()
        cal_win.root.after(0, _apply)

    def on_settings() -> None:
        cal_win.root.after(0, cal_win.open_settings)

    tray = create_tray(
        create_icon_image(date.today()), on_show, on_exit,
        current_mode=lambda: picker.mode, on_mode=on_mode,
        on_clear=on_clear, on_settings=on_settings,
    )

    # Run pystray in a daemon thread so it doesn't block tkinter
    tray_thread = threading.Thread(target=tray.run, daemon=True)
    tray_thread.start()

    # tkinter main loop on the main thread
    cal_win.root.mainloop()


if __name__ == "__main__":
    main()
