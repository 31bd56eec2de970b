"""Multi-month date picker window (tkinter) rendering a CalendarPicker."""

from __future__ import annotations

import logging
from datetime import date
from tkinter import font as tkfont
import tkinter as tk

from calendar_logic import (
    LOCALES,
    add_months,
    day_of_year,
    presentation_order,
    weekday_headers,
)
from grid_builder import Cell, Month, RangeState
from picker import CalendarPicker
from selection import RANGE_MODES, SelectionMode
from settings import load_settings, save_settings

logger = logging.getLogger(__name__)

# Colours
ACCENT = "#0078D4"
SEL_BG = "#B3D7F2"
HIGHLIGHT_BG = "#FFE8A3"
HEADER_BG = "#F3F3F3"
GRID_BG = "white"
PADDING_FG = "#BBBBBB"
DISABLED_FG = "#999999"

_MAX_WEEKS = 6
_MESSAGE_MS = 2500


def day_colors(cell: Cell) -> tuple[str, str]:
    """(background, foreground) for a cell from its flags."""
    if not cell.is_current_month:
        return GRID_BG, PADDING_FG
    if cell.is_selected:
        if cell.range_state is RangeState.MIDDLE:
            return SEL_BG, "black"
        return ACCENT, "white"
    if cell.is_highlighted:
        return HIGHLIGHT_BG, "black"
    if not cell.is_selectable:
        return GRID_BG, DISABLED_FG
    if cell.is_today:
        return GRID_BG, ACCENT
    return GRID_BG, "black"


def footer_text(picker: CalendarPicker, today: date) -> str:
    today_str = f"Today: {today.strftime('%d.%m.%Y')}"
    selected = picker.selected_dates
    if not selected:
        return today_str

    if picker.mode in RANGE_MODES and len(selected) > 1:
        lo, hi = selected[0], selected[-1]
        total_days = (hi - lo).days + 1
        full_weeks, rem_days = divmod(total_days, 7)
        parts: list[str] = []
        if full_weeks:
            parts.append(f"{full_weeks} week{'s' if full_weeks != 1 else ''}")
        if rem_days:
            parts.append(f"{rem_days} day{'s' if rem_days != 1 else ''}")
        range_str = f"{lo.strftime('%d.%m')} → {hi.strftime('%d.%m')}"
        return f"{range_str}:  {total_days} days  ({', '.join(parts)})     {today_str}"

    if len(selected) == 1:
        return f"Selected: {selected[0].strftime('%d.%m.%Y')}     {today_str}"
    return f"{len(selected)} dates selected     {today_str}"


class _MonthPanel:
    """Pre-allocated widget pool for a single month (header + 6 weeks max)."""

    __slots__ = ("frame", "header", "day_headers", "day_cells")

    def __init__(self, parent: tk.Frame, fonts: dict, on_click) -> None:
        self.frame = tk.Frame(parent, bg=GRID_BG)

        self.header = tk.Label(
            self.frame, font=fonts["header"], bg=HEADER_BG, fg="#333333",
        )
        self.header.grid(row=0, column=0, columnspan=7, sticky="we", pady=(0, 2))

        self.day_headers: list[tk.Label] = []
        for col in range(7):
            lbl = tk.Label(
                self.frame, font=fonts["bold"], bg=GRID_BG, fg="#333333", width=3,
            )
            lbl.grid(row=1, column=col)
            self.day_headers.append(lbl)

        self.day_cells: list[list[tk.Canvas]] = []
        for r in range(_MAX_WEEKS):
            row_cells: list[tk.Canvas] = []
            for c in range(7):
                cell = tk.Canvas(
                    self.frame, width=fonts["cell_w"], height=fonts["cell_h"],
                    bg=GRID_BG, highlightthickness=0, borderwidth=0,
                )
                cell.grid(row=r + 2, column=c)
                cell.bind("<ButtonRelease-1>", on_click)
                row_cells.append(cell)
            self.day_cells.append(row_cells)


class CalendarWindow:
    """Scrollable months of a CalendarPicker; clicks go to its selection engine."""

    def __init__(self, picker: CalendarPicker | None = None) -> None:
        self.root = tk.Tk()
        self.root.title(self._title())
        self.root.resizable(False, False)
        self.root.configure(bg=GRID_BG)
        self.root.attributes("-topmost", True)

        self._setup_fonts()

        settings = load_settings()
        self.months_before: int = settings["months_before"]
        self.months_after: int = settings["months_after"]
        self.months_shown: int = settings["months_shown"]

        self.picker = picker or CalendarPicker()
        self.picker.on_invalid_date_selected = self._on_invalid_date
        self._init_picker(settings["locale"], SelectionMode(settings["selection_mode"]))

        # Index of the first visible month in picker.grid
        self._first_month = 0
        # Widget-to-cell mapping (filled during _rebuild_months)
        self._widget_cells: dict[int, Cell] = {}
        self._message: str | None = None
        self._message_after_id: str | None = None

        _tmp = tk.Label(self.root, text="00", font=self.font_normal, width=3)
        _tmp.update_idletasks()
        self._panel_fonts = {
            "header": self.font_header, "bold": self.font_bold,
            "cell_w": _tmp.winfo_reqwidth(), "cell_h": _tmp.winfo_reqheight(),
        }
        _tmp.destroy()

        self._panels: list[_MonthPanel] = []
        self._build_shell()
        self._go_today()

        self.root.bind("<Escape>", self._on_escape)
        self.root.protocol("WM_DELETE_WINDOW", self.hide)
        self.root.withdraw()

    def _init_picker(self, locale: str, mode: SelectionMode) -> None:
        today = date.today()
        first = add_months(today.replace(day=1), -self.months_before)
        last = add_months(today.replace(day=1), self.months_after + 1)
        self.picker.init(first, last, locale, today=today).in_mode(mode)

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------
    def _setup_fonts(self) -> None:
        families = tkfont.families(self.root)
        base = "Segoe UI" if "Segoe UI" in families else "TkDefaultFont"
        self.font_normal = tkfont.Font(family=base, size=9)
        self.font_bold = tkfont.Font(family=base, size=9, weight="bold")
        self.font_header = tkfont.Font(family=base, size=10, weight="bold")
        self.font_nav = tkfont.Font(family=base, size=12, weight="bold")
        self.font_footer = tkfont.Font(family=base, size=9)

    @staticmethod
    def _title() -> str:
        return f"Mini Calendar  Day: {day_of_year(date.today())}"

    # ------------------------------------------------------------------
    # Build shell (once): nav bar + months placeholder + footer
    # ------------------------------------------------------------------
    def _build_shell(self) -> None:
        self._outer = tk.Frame(self.root, bg=GRID_BG)
        self._outer.pack(padx=6, pady=4)

        nav = tk.Frame(self._outer, bg=GRID_BG)
        nav.pack(fill="x", pady=(0, 2))

        buttons = (
            ("left", "◀◀", self.font_nav, lambda _e: self._navigate(-12)),
            ("left", "◀", self.font_nav, lambda _e: self._navigate(-1)),
            ("left", "Today", self.font_bold, lambda _e: self._go_today()),
            ("right", "▶▶", self.font_nav, lambda _e: self._navigate(12)),
            ("right", "▶", self.font_nav, lambda _e: self._navigate(1)),
        )
        for side, text, fnt, handler in buttons:
            btn = tk.Label(nav, text=text, font=fnt, bg=GRID_BG, cursor="hand2",
                           fg=ACCENT if text == "Today" else "black")
            btn.pack(side=side, padx=6)
            btn.bind("<Button-1>", handler)

        self._months_frame = tk.Frame(self._outer, bg=GRID_BG)
        self._months_frame.pack()

        self._footer_label = tk.Label(
            self._outer, font=self.font_footer, bg=GRID_BG, fg="#555555",
        )
        self._footer_label.pack(pady=(4, 0))

    # ------------------------------------------------------------------
    # Rebuild visible months using pooled panels
    # ------------------------------------------------------------------
    def _rebuild_months(self) -> None:
        self._widget_cells.clear()
        grid = self.picker.grid
        visible = grid.months[self._first_month:self._first_month + self.months_shown]

        while len(self._panels) < len(visible):
            self._panels.append(_MonthPanel(
                self._months_frame, self._panel_fonts, self._on_click))

        headers = weekday_headers(grid.locale)
        for i, month in enumerate(visible):
            panel = self._panels[i]
            panel.frame.grid(row=0, column=i, padx=6, pady=2, sticky="n")
            for lbl, text in zip(panel.day_headers, headers):
                lbl.configure(text=text)
            self._fill_panel(panel, month)

        for i in range(len(visible), len(self._panels)):
            self._panels[i].frame.grid_forget()

        self._update_footer()

    def _fill_panel(self, panel: _MonthPanel, month: Month) -> None:
        """Reconfigure an existing panel's cells, no widget creation."""
        panel.header.configure(text=month.label)
        loc = self.picker.grid.locale
        interactive = not self.picker.display_only
        for r in range(_MAX_WEEKS):
            if r < len(month.weeks):
                row = presentation_order(month.weeks[r], loc)
                for c, cell in enumerate(row):
                    canvas = panel.day_cells[r][c]
                    bg, fg = day_colors(cell)
                    self._draw_cell(
                        canvas, str(cell.value), bg, fg,
                        self.font_bold if cell.is_today else self.font_normal,
                        cursor="hand2" if interactive and cell.is_selectable else "",
                    )
                    self._widget_cells[id(canvas)] = cell
            else:
                for canvas in panel.day_cells[r]:
                    canvas.delete("all")
                    canvas.configure(bg=GRID_BG, cursor="")

    @staticmethod
    def _draw_cell(cell: tk.Canvas, text: str, bg: str, fg: str, font,
                   cursor: str = "") -> None:
        cell.delete("all")
        w = cell.winfo_width()
        h = cell.winfo_height()
        if w <= 1:
            w = int(cell["width"]) + 2
        if h <= 1:
            h = int(cell["height"]) + 2
        cell.configure(bg=bg, cursor=cursor)
        cell.create_text(w // 2, h // 2, text=text, fill=fg, font=font)

    # ------------------------------------------------------------------
    # Clicks and messages
    # ------------------------------------------------------------------
    def _on_click(self, event: tk.Event) -> None:
        cell = self._widget_cells.get(id(event.widget))
        if cell is None or not cell.is_current_month:
            return
        self.picker.handle_click(cell)
        self._rebuild_months()

    def _on_invalid_date(self, day: date) -> None:
        grid = self.picker.grid
        last = grid.max_date.toordinal() - 1
        self._flash(
            f"{day.strftime('%d.%m.%Y')} can't be selected "
            f"(pick {grid.min_date.strftime('%d.%m.%Y')} – "
            f"{date.fromordinal(last).strftime('%d.%m.%Y')})")

    def _flash(self, message: str) -> None:
        self._message = message
        if self._message_after_id is not None:
            self.root.after_cancel(self._message_after_id)
        self._message_after_id = self.root.after(_MESSAGE_MS, self._clear_message)
        self._update_footer()

    def _clear_message(self) -> None:
        self._message = None
        self._message_after_id = None
        self._update_footer()

    def _update_footer(self) -> None:
        text = self._message or footer_text(self.picker, date.today())
        self._footer_label.configure(text=text)

    # ------------------------------------------------------------------
    # ESC clears selection first, then hides
    # ------------------------------------------------------------------
    def _on_escape(self, _event: tk.Event) -> None:
        if self.picker.selected_dates:
            self.clear_selection()
        else:
            self.hide()

    def clear_selection(self) -> None:
        self.picker.clear_selection()
        self._rebuild_months()

    def set_mode(self, mode: SelectionMode) -> None:
        self.picker.set_mode(mode)
        settings = load_settings()
        settings["selection_mode"] = mode.value
        save_settings(settings)
        self._rebuild_months()

    # ------------------------------------------------------------------
    # Settings dialog
    # ------------------------------------------------------------------
    def open_settings(self) -> None:
        dlg = tk.Toplevel(self.root)
        dlg.title("Settings")
        dlg.resizable(False, False)
        dlg.attributes("-topmost", True)
        dlg.grab_set()

        frame = tk.Frame(dlg, padx=12, pady=8)
        frame.pack()

        locale_var = tk.StringVar(value=self.picker.locale.code)
        mode_var = tk.StringVar(value=self.picker.mode.value)
        spins: dict[str, tk.Spinbox] = {}

        rows = (
            ("Months before:", "months_before", self.months_before, 0, 24),
            ("Months after:", "months_after", self.months_after, 0, 36),
            ("Months shown:", "months_shown", self.months_shown, 1, 6),
        )
        for r, (text, key, value, lo, hi) in enumerate(rows):
            tk.Label(frame, text=text, font=self.font_normal).grid(
                row=r, column=0, sticky="w", pady=4,
            )
            spin = tk.Spinbox(frame, from_=lo, to=hi, width=4, font=self.font_normal)
            spin.delete(0, "end")
            spin.insert(0, str(value))
            spin.grid(row=r, column=1, padx=(8, 0), pady=4, sticky="w")
            spins[key] = spin

        tk.Label(frame, text="Locale:", font=self.font_normal).grid(
            row=3, column=0, sticky="w", pady=4,
        )
        tk.OptionMenu(frame, locale_var, *sorted(LOCALES)).grid(
            row=3, column=1, padx=(8, 0), pady=4, sticky="w",
        )
        tk.Label(frame, text="Selection:", font=self.font_normal).grid(
            row=4, column=0, sticky="w", pady=4,
        )
        tk.OptionMenu(frame, mode_var, *[m.value for m in SelectionMode]).grid(
            row=4, column=1, padx=(8, 0), pady=4, sticky="w",
        )

        btn_frame = tk.Frame(frame)
        btn_frame.grid(row=5, column=0, columnspan=2, pady=(8, 0))

        def on_ok() -> None:
            try:
                before = max(0, min(24, int(spins["months_before"].get())))
                after = max(0, min(36, int(spins["months_after"].get())))
                shown = max(1, min(6, int(spins["months_shown"].get())))
            except ValueError:
                return

            settings = load_settings()
            settings.update(
                months_before=before, months_after=after, months_shown=shown,
                locale=locale_var.get(), selection_mode=mode_var.get(),
            )
            save_settings(settings)
            dlg.destroy()
            self.apply_settings(settings)

        tk.Button(btn_frame, text="OK", width=8, command=on_ok).pack(
            side="left", padx=4,
        )
        tk.Button(btn_frame, text="Cancel", width=8, command=dlg.destroy).pack(
            side="left", padx=4,
        )

    def apply_settings(self, settings: dict) -> None:
        """New bounds rebuild from scratch; a locale change keeps selections."""
        bounds_changed = (settings["months_before"] != self.months_before
                          or settings["months_after"] != self.months_after)
        self.months_before = settings["months_before"]
        self.months_after = settings["months_after"]
        self.months_shown = settings["months_shown"]
        mode = SelectionMode(settings["selection_mode"])
        logger.debug("Applying settings: %s", settings)
        if bounds_changed:
            self._init_picker(settings["locale"], mode)
        else:
            if settings["locale"] != self.picker.locale.code:
                self.picker.set_locale(settings["locale"])
            self.picker.set_mode(mode)
        self._go_today()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def _navigate(self, direction: int) -> None:
        last_start = max(0, len(self.picker.grid) - self.months_shown)
        self._first_month = max(0, min(last_start, self._first_month + direction))
        self._rebuild_months()

    def _go_today(self) -> None:
        last_start = max(0, len(self.picker.grid) - self.months_shown)
        self._first_month = min(self.picker.scroll_target(), last_start)
        self._rebuild_months()

    # ------------------------------------------------------------------
    # Show / Hide / Toggle
    # ------------------------------------------------------------------
    def toggle(self) -> None:
        if self.root.state() == "withdrawn" or not self.root.winfo_viewable():
            self.show()
        else:
            self.hide()

    def show(self) -> None:
        self.root.title(self._title())
        self._go_today()
        self.root.deiconify()
        self._position_window()
        self.root.lift()
        self.root.focus_force()

    def hide(self) -> None:
        self.root.withdraw()

    # ------------------------------------------------------------------
    # Position bottom-right of the screen
    # ------------------------------------------------------------------
    def _position_window(self) -> None:
        self.root.update_idletasks()
        win_w = self.root.winfo_reqwidth()
        win_h = self.root.winfo_reqheight()
        x = self.root.winfo_screenwidth() - win_w - 12
        y = self.root.winfo_screenheight() - win_h - 60
        self.root.geometry(f"+{x}+{y}")
