#!/usr/bin/env python3
"""Routinely TUI: today's routines, the routine list and analytics, powered by Textual."""

from __future__ import annotations

import sys

from rich.text import Text
from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.reactive import reactive
from textual.widgets import Checkbox, DataTable, Footer, Header, Label, Static

from routinely import (
    RoutineStore,
    RoutinelyError,
    build_snapshot,
    configure_logging,
    load_settings,
    now_local,
    workspace_root,
)
from routinely.dates import format_date_display, greeting
from routinely.timeutils import format_duration, format_time_range, total_scheduled_minutes


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
}

#main-layout {
    height: 1fr;
    padding: 0 1;
}

.section-title {
    text-style: bold;
    color: $text;
    margin: 1 0 0 0;
    padding: 0 1;
}

#today-summary {
    height: auto;
    padding: 0 1;
    color: $text-muted;
}

.routine-row {
    height: auto;
}

.routine-row Checkbox {
    width: 1fr;
    height: auto;
}

.routine-time {
    width: 22;
    color: $text-muted;
    padding: 1 1 0 0;
}

.routine-done {
    opacity: 50%;
}

#status-info {
    height: auto;
    padding: 1 2;
    margin: 0 0 1 0;
    border: tall $primary-background-darken-2;
}

.insight {
    height: auto;
    padding: 0 1;
    margin: 0 0 1 0;
    border-left: thick $primary;
}

.insight-warning {
    border-left: thick $warning;
}

#weekly-table, #routines-table {
    height: auto;
    max-height: 12;
}
"""


# ── Custom widgets ─────────────────────────────────────────────


class RoutineRow(Horizontal):
    """One routine for today: time range + checkbox."""

    def __init__(self, routine_id: str, label: str, time_range: str, done: bool, **kwargs) -> None:
        super().__init__(**kwargs)
        self.routine_id = routine_id
        self.routine_label = label
        self.time_range = time_range
        self.done = done

    def compose(self) -> ComposeResult:
        yield Label(self.time_range, classes="routine-time")
        yield Checkbox(Text(self.routine_label), value=self.done)

    def on_mount(self) -> None:
        self.add_class("routine-row")
        if self.done:
            self.add_class("routine-done")


# ── Screens ────────────────────────────────────────────────────


class TodayScreen(VerticalScroll):
    """Today's routines sorted by start time."""

    def __init__(self, store: RoutineStore, **kwargs) -> None:
        super().__init__(**kwargs)
        self.store = store

    def compose(self) -> ComposeResult:
        yield Label("Today", classes="section-title")
        yield Static(id="today-summary")
        yield Vertical(id="today-list")

    def on_mount(self) -> None:
        self.rebuild()

    def _today(self):
        now = now_local(self.store.root)
        return build_snapshot(self.store.completions, self.store.routines, now.date(), now).today

    def update_summary(self) -> None:
        today = self._today()
        self.query_one("#today-summary", Static).update(
            f"{today.completed}/{today.total} done ({today.percentage}%) · {today.status_text}"
        )

    def rebuild(self) -> None:
        self.update_summary()
        listing = self.query_one("#today-list", Vertical)
        listing.remove_children()
        for item in self._today().items:
            listing.mount(
                RoutineRow(
                    routine_id=item["id"],
                    label=f'{item["title"]} · {item["category"]}',
                    time_range=item["timeRange"],
                    done=item["isCompleted"],
                )
            )


class RoutinesScreen(Vertical):
    """Routine templates as a data table."""

    def __init__(self, store: RoutineStore, **kwargs) -> None:
        super().__init__(**kwargs)
        self.store = store

    def compose(self) -> ComposeResult:
        yield Label("Routines", classes="section-title")
        yield DataTable(id="routines-table")
        yield Static(id="routines-total")

    def on_mount(self) -> None:
        table: DataTable = self.query_one("#routines-table", DataTable)
        table.add_columns("ID", "Title", "Time", "Category", "Required")
        for r in self.store.routines:
            table.add_row(
                Text(r.id),
                Text(r.title),
                format_time_range(r.start_time, r.end_time),
                r.category,
                "yes" if r.required else "no",
            )
        planned = format_duration(total_scheduled_minutes(self.store.routines))
        self.query_one("#routines-total", Static).update(f"Total scheduled: {planned}")


class AnalyticsScreen(VerticalScroll):
    """Streaks, the last 7 days and insights."""

    def __init__(self, store: RoutineStore, **kwargs) -> None:
        super().__init__(**kwargs)
        self.store = store

    def compose(self) -> ComposeResult:
        yield Label("Analytics", classes="section-title")
        yield Static(id="status-info")
        yield Label("Last 7 days", classes="section-title")
        yield DataTable(id="weekly-table")
        yield Label("Insights", classes="section-title")
        yield Vertical(id="insight-list")

    def on_mount(self) -> None:
        now = now_local(self.store.root)
        snap = build_snapshot(self.store.completions, self.store.routines, now.date(), now)

        self.query_one("#status-info", Static).update(
            f"Current streak: {snap.streaks.current_streak} days\n"
            f"Best streak: {snap.streaks.best_streak} days"
        )

        table: DataTable = self.query_one("#weekly-table", DataTable)
        table.add_columns("Date", "Done", "Total", "Rate")
        for day in snap.weekly:
            table.add_row(day.date, str(day.completed), str(day.total), f"{day.percentage:.0%}")

        insight_list = self.query_one("#insight-list", Vertical)
        if not snap.insights:
            insight_list.mount(Static("(no insights yet)"))
        for insight in snap.insights:
            classes = "insight insight-warning" if insight.type == "warning" else "insight"
            text = Text(insight.title, style="bold")
            text.append(f"\n{insight.description}")
            insight_list.mount(Static(text, classes=classes))


# ── Main app ───────────────────────────────────────────────────


class RoutinelyApp(App):
    """Routinely: daily routine tracker."""

    TITLE = "Routinely"
    CSS = CSS
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("d", "show_today", "Today"),
        Binding("r", "show_routines", "Routines"),
        Binding("a", "show_analytics", "Analytics"),
        Binding("q", "quit", "Quit"),
    ]

    current_view: reactive[str] = reactive("today")

    def __init__(self, store: RoutineStore) -> None:
        super().__init__()
        self.store = store

    def compose(self) -> ComposeResult:
        yield Header()
        yield Vertical(id="main-layout")
        yield Footer()

    def on_mount(self) -> None:
        now = now_local(self.store.root)
        name = load_settings(self.store.root).user_name
        self.sub_title = f"{greeting(now.hour)}, {name} · {format_date_display(now.date())}"
        self._switch_to("today")

    @on(Checkbox.Changed)
    def _on_checkbox_toggle(self, event: Checkbox.Changed) -> None:
        row = event.checkbox.parent
        if not isinstance(row, RoutineRow) or event.value == row.done:
            return
        row.done = event.value
        row.set_class(event.value, "routine-done")
        self._toggle(row.routine_id)

    @work(thread=True)
    def _toggle(self, routine_id: str) -> None:
        try:
            self.store.toggle_task(routine_id)
        except RoutinelyError as e:
            self.call_from_thread(self.notify, str(e), title="Save failed", severity="error")
            self.call_from_thread(self._switch_to, "today")
            return
        self.call_from_thread(self._refresh_summary)

    def _refresh_summary(self) -> None:
        for screen in self.query(TodayScreen):
            screen.update_summary()

    def action_show_today(self) -> None:
        self._switch_to("today")

    def action_show_routines(self) -> None:
        self._switch_to("routines")

    def action_show_analytics(self) -> None:
        self._switch_to("analytics")

    def _switch_to(self, view: str) -> None:
        main = self.query_one("#main-layout", Vertical)
        main.remove_children()
        if view == "routines":
            main.mount(RoutinesScreen(self.store))
        elif view == "analytics":
            main.mount(AnalyticsScreen(self.store))
        else:
            main.mount(TodayScreen(self.store))
        self.current_view = view


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = workspace_root()
    if not root.exists():
        print(f"Workspace not found: {root}")
        print("Set ROUTINELY_ROOT to an existing directory.")
        sys.exit(1)

    configure_logging(root=root)
    try:
        store = RoutineStore.load(root)
    except RoutinelyError as e:
        print(f"Cannot load workspace: {e}")
        sys.exit(1)
    if not store.routines:
        store.reset_routines()

    RoutinelyApp(store).run()


if __name__ == "__main__":
    main()
