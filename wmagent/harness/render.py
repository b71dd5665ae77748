"""Rich renderables for the harness live view."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
from rich.columns import Columns
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

MOTIVATION_LABELS = (
    "happiness",
    "energy",
    "stress",
    "social_need",
    "confidence",
    "rest",
    "hunger",
    "comfort",
    "achievement",
    "extraversion",
    "neuroticism",
    "conscientiousness",
)

_BARS = " ▁▂▃▄▅▆▇█"


def sparkline(values: Sequence[float], width: int = 48) -> Text:
    """Min-max scaled bar glyphs for the last `width` values."""
    vals = np.asarray(list(values)[-width:], dtype=float)
    txt = Text()
    if vals.size == 0:
        return txt
    lo, hi = float(vals.min()), float(vals.max())
    span = hi - lo if hi > lo else 1.0
    for v in vals:
        idx = int(round((float(v) - lo) / span * (len(_BARS) - 1)))
        txt.append(_BARS[idx], style="cyan")
    return txt


def motivation_table(context: Sequence[float]) -> Table:
    table = Table(show_header=True, header_style="bold", expand=False)
    table.add_column("signal")
    table.add_column("value", justify="right")
    for label, value in zip(MOTIVATION_LABELS, context):
        v = float(value)
        style = "green" if v >= 0.5 else ("red" if v < 0.0 else "white")
        table.add_row(label, Text(f"{v:+.3f}", style=style))
    return table


def render_frame(
    *,
    step: int,
    action: Optional[Sequence[int]],
    hidden_norms: Sequence[float],
    motivation: Sequence[float],
    skipped: int,
) -> Group:
    header = Text(f"tick={step}  action={list(action) if action is not None else None}  skipped={skipped}")
    hidden = Panel(sparkline(hidden_norms), title="|hidden|", border_style="blue")
    motiv = Panel(motivation_table(motivation), title="motivation", border_style="magenta")
    return Group(header, Columns([hidden, motiv]))
