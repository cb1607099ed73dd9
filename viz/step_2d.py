from __future__ import annotations

import numpy as np
import plotly.graph_objects as go

from gradnoise.core import fade, lerp
from gradnoise.grid import GradientGrid

_CORNER_XY = {
    "c00": (0.0, 0.0),
    "c10": (1.0, 0.0),
    "c01": (0.0, 1.0),
    "c11": (1.0, 1.0),
}

_TRANSPARENT = dict(paper_bgcolor="rgba(0,0,0,0)", plot_bgcolor="rgba(0,0,0,0)")


def _arrow(x0: float, y0: float, x1: float, y1: float, color: str) -> dict:
    return dict(
        x=x1,
        y=y1,
        ax=x0,
        ay=y0,
        xref="x",
        yref="y",
        axref="x",
        ayref="y",
        showarrow=True,
        arrowhead=2,
        arrowwidth=2,
        arrowcolor=color,
        text="",
    )


def cell_figure(debug: dict) -> go.Figure:
    """One lattice cell: corner gradients, the query point and its displacements."""

    xf = float(debug["relative"]["xf"])
    yf = float(debug["relative"]["yf"])
    corners = debug["corners"]
    cell = debug["cell"]

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=[0, 1, 1, 0, 0],
            y=[0, 0, 1, 1, 0],
            mode="lines",
            line=dict(color="rgba(255,255,255,0.6)", width=2),
            showlegend=False,
            hoverinfo="skip",
        )
    )

    labels = []
    for key, (cx, cy) in _CORNER_XY.items():
        ix = cell["xi1"] if cx else cell["xi0"]
        iy = cell["yi1"] if cy else cell["yi0"]
        labels.append(f"({ix},{iy}) dot={float(corners[key]['dot']):.3f}")
    fig.add_trace(
        go.Scatter(
            x=[c[0] for c in _CORNER_XY.values()],
            y=[c[1] for c in _CORNER_XY.values()],
            mode="markers+text",
            marker=dict(size=10, color="rgba(255,255,255,0.9)"),
            text=labels,
            textposition="top center",
            showlegend=False,
            hoverinfo="skip",
        )
    )
    fig.add_trace(
        go.Scatter(
            x=[xf],
            y=[yf],
            mode="markers+text",
            marker=dict(size=12, color="#ffb000"),
            text=[f"n={float(debug['noise']):.3f}"],
            textposition="bottom center",
            showlegend=False,
        )
    )

    annotations = []
    for key, (cx, cy) in _CORNER_XY.items():
        c = corners[key]
        annotations.append(
            _arrow(cx, cy, cx + 0.35 * float(c["gx"]), cy + 0.35 * float(c["gy"]),
                   "rgba(0, 200, 255, 0.9)")
        )
        annotations.append(_arrow(cx, cy, xf, yf, "rgba(255, 176, 0, 0.35)"))

    fig.update_layout(
        annotations=annotations,
        margin=dict(l=0, r=0, t=0, b=0),
        height=420,
        **_TRANSPARENT,
    )
    fig.update_xaxes(range=[-0.4, 1.4], visible=False)
    fig.update_yaxes(range=[-0.4, 1.4], visible=False, scaleanchor="x")
    return fig


def fade_curve_figure(*, t_value: float, title: str) -> go.Figure:
    t = np.linspace(0.0, 1.0, 256, dtype=np.float64)
    tv = float(np.clip(t_value, 0.0, 1.0))
    fv = float(fade(np.array(tv, dtype=np.float64)))

    fig = go.Figure()
    fig.add_trace(go.Scatter(x=t, y=t, mode="lines", name="linear",
                             line=dict(dash="dot", color="rgba(255,255,255,0.35)")))
    fig.add_trace(go.Scatter(x=t, y=fade(t), mode="lines", name="fade",
                             line=dict(color="rgba(255,255,255,0.85)", width=2)))
    fig.add_trace(
        go.Scatter(
            x=[tv],
            y=[fv],
            mode="markers+text",
            marker=dict(size=10, color="#ffb000"),
            text=[f"{tv:.3f} -> {fv:.3f}"],
            textposition="top left",
            showlegend=False,
        )
    )
    fig.update_layout(
        title=title,
        margin=dict(l=0, r=0, t=40, b=0),
        height=260,
        legend=dict(orientation="h"),
        **_TRANSPARENT,
    )
    fig.update_xaxes(range=[0, 1])
    fig.update_yaxes(range=[0, 1])
    return fig


def scanline_series_from_debug(debug: dict, *, steps: int = 256) -> dict:
    """Noise along x in [0, 1) of the debugged cell, y held at the query's row.

    Reuses the four corner gradients from ``debug``, so the series matches
    ``sample`` at ``(xi0 + t, y)``.
    """

    steps = max(8, int(steps))
    yf = float(debug["relative"]["yf"])
    v = float(debug["fade"]["v"])

    t = np.linspace(0.0, 1.0, steps, endpoint=False, dtype=np.float64)
    u = fade(t)

    dots = {}
    for key, (cx, cy) in _CORNER_XY.items():
        c = debug["corners"][key]
        dots[key] = (t - cx) * float(c["gx"]) + (yf - cy) * float(c["gy"])

    x_lerp0 = lerp(dots["c00"], dots["c10"], u)
    x_lerp1 = lerp(dots["c01"], dots["c11"], u)
    return {
        "t": t,
        "xf": float(debug["relative"]["xf"]),
        "dots": dots,
        "lerp": {
            "x_lerp0": x_lerp0,
            "x_lerp1": x_lerp1,
            "noise": lerp(x_lerp0, x_lerp1, v),
        },
    }


def scanline_figure(series: dict) -> go.Figure:
    t = series["t"]
    fig = go.Figure()
    for key, trace in series["dots"].items():
        fig.add_trace(go.Scatter(x=t, y=trace, mode="lines", name=f"dot {key}",
                                 line=dict(width=1)))
    fig.add_trace(go.Scatter(x=t, y=series["lerp"]["noise"], mode="lines",
                             name="noise", line=dict(color="white", width=3)))
    fig.add_vline(x=float(series["xf"]), line_width=2, line_dash="dot",
                  line_color="#ffb000")
    fig.update_layout(
        title="Scanline through the cell: corner dots and blended noise",
        margin=dict(l=0, r=0, t=40, b=0),
        height=300,
        legend=dict(orientation="h"),
        **_TRANSPARENT,
    )
    fig.update_xaxes(range=[0, 1])
    return fig


def gradient_grid_figure(grid: GradientGrid, *, max_vertices: int = 24) -> go.Figure:
    """Arrow plot of the lattice gradients (top-left corner only when large)."""

    w = min(grid.width, int(max_vertices))
    h = min(grid.height, int(max_vertices))
    vec = grid.vectors[:h, :w]

    fig = go.Figure()
    ys, xs = np.mgrid[0:h, 0:w]
    fig.add_trace(
        go.Scatter(
            x=xs.reshape(-1),
            y=ys.reshape(-1),
            mode="markers",
            marker=dict(size=4, color="rgba(255,255,255,0.7)"),
            showlegend=False,
            hoverinfo="skip",
        )
    )
    annotations = [
        _arrow(float(x), float(y), x + 0.4 * float(vec[y, x, 0]),
               y + 0.4 * float(vec[y, x, 1]), "rgba(0, 200, 255, 0.8)")
        for y in range(h)
        for x in range(w)
    ]
    fig.update_layout(
        annotations=annotations,
        margin=dict(l=0, r=0, t=0, b=0),
        height=420,
        **_TRANSPARENT,
    )
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False, autorange="reversed", scaleanchor="x")
    return fig
