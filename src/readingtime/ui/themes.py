"""Textual CSS themes for reading time."""

APP_CSS = """
/* ── Global ────────────────────────────────── */
Screen {
    background: $surface;
}

.card {
    height: auto;
    margin: 1 2 0 2;
    padding: 1 2;
    background: $panel;
    border: round $primary;
}

.card-title {
    text-style: bold;
}

/* ── Home Screen ───────────────────────────── */
#goal-bar {
    color: $accent;
}

#timer {
    height: 5;
    content-align: center middle;
    text-style: bold;
}

/* ── Library Screen ────────────────────────── */
#library-header, #stats-header {
    dock: top;
    height: 3;
    padding: 1 2;
    background: $primary;
    color: $text;
    text-style: bold;
}

#filter-input {
    dock: top;
    margin: 0 2;
}

#book-table, #week-table {
    height: 1fr;
}

/* ── Stats Screen ──────────────────────────── */
#stats-summary {
    height: auto;
    padding: 1 2;
    background: $surface-darken-1;
}
"""
