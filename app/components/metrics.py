from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from config import THEME


@dataclass(frozen=True)
class Kpi:
    label: str
    value: str
    note: Optional[str] = None


def render_kpi_row(kpis: list[Kpi]) -> None:
    cols = st.columns(len(kpis))
    for c, k in zip(cols, kpis):
        with c:
            note_html = f'<div class="metric-delta">{k.note}</div>' if k.note else ""
            st.markdown(
                f"""
<div class="metric-card">
  <div class="metric-label">{k.label}</div>
  <div class="metric-value">{k.value}</div>
  {note_html}
</div>
                """,
                unsafe_allow_html=True,
            )


def create_plotly_theme() -> dict:
    """Shared Plotly styling: card surface, DM Sans, medal colorway."""
    return {
        "font_family": "DM Sans, system-ui, -apple-system, Segoe UI, Roboto, Arial, sans-serif",
        "font_color": THEME["text_primary"],
        "paper_bgcolor": THEME["bg_card"],
        "plot_bgcolor": THEME["bg_card"],
        "colorway": [
            THEME["navy_900"],
            THEME["accent_primary"],
            THEME["gold"],
            THEME["silver"],
            THEME["bronze"],
        ],
        "gridcolor": THEME["grid"],
        "axis_linecolor": THEME["border_color"],
        "legend": {
            "orientation": "h",
            "yanchor": "bottom",
            "y": 1.02,
            "xanchor": "left",
            "x": 0,
            "font": {"color": THEME["text_secondary"]},
        },
        "title_font": {"color": THEME["navy_900"], "size": 16},
    }


def apply_plotly_theme(fig: go.Figure, x_title: str, y_title: str) -> go.Figure:
    theme = create_plotly_theme()
    fig.update_layout(
        margin=dict(l=10, r=10, t=44, b=10),
        font=dict(family=theme["font_family"], color=theme["font_color"]),
        paper_bgcolor=theme["paper_bgcolor"],
        plot_bgcolor=theme["plot_bgcolor"],
        colorway=theme["colorway"],
        legend=theme["legend"],
        title_font=theme["title_font"],
    )
    fig.update_xaxes(
        title_text=x_title,
        gridcolor=theme["gridcolor"],
        zeroline=False,
        linecolor=theme["axis_linecolor"],
        tickfont=dict(color=THEME["text_secondary"]),
    )
    fig.update_yaxes(
        title_text=y_title,
        gridcolor=theme["gridcolor"],
        zeroline=False,
        linecolor=theme["axis_linecolor"],
        tickfont=dict(color=THEME["text_secondary"]),
    )
    return fig


def medal_bar_chart(df: pd.DataFrame, label: str, title: str = "") -> None:
    """Stacked gold/silver/bronze bars per row of `df` (columns: label, gold, silver, bronze)."""
    long = df.melt(id_vars=[label], value_vars=["gold", "silver", "bronze"], var_name="medal", value_name="count")
    fig = px.bar(
        long,
        x=label,
        y="count",
        color="medal",
        title=title,
        color_discrete_map={"gold": THEME["gold"], "silver": THEME["silver"], "bronze": THEME["bronze"]},
    )
    fig = apply_plotly_theme(fig, x_title="", y_title="Medals")
    st.plotly_chart(fig, use_container_width=True)


def points_bar_chart(df: pd.DataFrame, label: str, title: str = "") -> None:
    fig = px.bar(df, x=label, y="points", title=title, text="points")
    fig = apply_plotly_theme(fig, x_title="", y_title="Points")
    fig.update_traces(marker_color=THEME["accent_primary"])
    st.plotly_chart(fig, use_container_width=True)
