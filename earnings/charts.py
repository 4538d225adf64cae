from __future__ import annotations

from typing import Any, Dict, List

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()

PALETTE = ["#3B82F6", "#10B981", "#F59E0B", "#EF4444", "#8B5CF6", "#06B6D4", "#84CC16", "#F97316"]


def to_vega_spec(chart: alt.TopLevelMixin) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def trends_chart(rows: List[Dict[str, Any]], goal_hours_per_week: float) -> alt.LayerChart:
    data = pd.DataFrame(rows)
    base = alt.Chart(data).encode(x=alt.X("week_start:T", title="Week"))
    hours = base.mark_line(point=True, color=PALETTE[0]).encode(
        y=alt.Y("hours:Q", title="Hours"),
        tooltip=["week:N", alt.Tooltip("hours:Q", format=".2f"), alt.Tooltip("surplus:Q", format="+.2f")],
    )
    target = (
        alt.Chart(pd.DataFrame({"target": [goal_hours_per_week]}))
        .mark_rule(color=PALETTE[3], strokeDash=[5, 5])
        .encode(y="target:Q")
    )
    earnings = base.mark_line(point=True, color=PALETTE[1]).encode(
        y=alt.Y("earnings:Q", title="Earnings", axis=alt.Axis(format="$,.0f")),
        tooltip=["week:N", alt.Tooltip("earnings:Q", format="$,.2f")],
    )
    return alt.layer(hours + target, earnings).resolve_scale(y="independent").properties(height=400)


def projects_chart(rows: List[Dict[str, Any]]) -> alt.Chart:
    return (
        alt.Chart(pd.DataFrame(rows))
        .mark_bar(color=PALETTE[0])
        .encode(
            x=alt.X("name:N", sort="-y", title="Project"),
            y=alt.Y("earnings:Q", title="Earnings", axis=alt.Axis(format="$,.0f")),
            tooltip=["name:N", alt.Tooltip("earnings:Q", format="$,.2f"), alt.Tooltip("hours:Q", format=".2f"), "entries:Q"],
        )
        .properties(height=400)
    )


def pay_types_chart(rows: List[Dict[str, Any]]) -> alt.Chart:
    return (
        alt.Chart(pd.DataFrame(rows))
        .mark_arc()
        .encode(
            theta=alt.Theta("value:Q"),
            color=alt.Color("name:N", scale=alt.Scale(range=PALETTE), title="Pay Type"),
            tooltip=["name:N", alt.Tooltip("value:Q", format="$,.2f"), "count:Q"],
        )
        .properties(height=400)
    )


def daily_chart(rows: List[Dict[str, Any]]) -> alt.Chart:
    return (
        alt.Chart(pd.DataFrame(rows))
        .mark_bar(color=PALETTE[1])
        .encode(
            x=alt.X("date:T", title="Day"),
            y=alt.Y("earnings:Q", title="Earnings", axis=alt.Axis(format="$,.0f")),
            tooltip=["date:T", alt.Tooltip("hours:Q", format=".2f"), alt.Tooltip("earnings:Q", format="$,.2f")],
        )
        .properties(height=400)
    )
