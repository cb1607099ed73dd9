from __future__ import annotations

import numpy as np
import plotly.graph_objects as go
import streamlit as st

from gradnoise import (
    GradientGrid,
    GradientNoiseError,
    OctaveParams,
    debug_point,
    generate_field,
    grid_dimensions,
)
from gradnoise.config import (
    DEFAULT_CELL_SIZE,
    DEFAULT_FREQUENCY_MULTIPLIER,
    DEFAULT_OCTAVES,
    DEFAULT_PERSISTENCE,
    DEFAULT_SEED,
)
from viz.export import array_to_npy_bytes, array_to_png_bytes
from viz.palette import FOREST_TERRAIN, grayscale_u8, terrain_rgb_u8
from viz.step_2d import (
    cell_figure,
    fade_curve_figure,
    gradient_grid_figure,
    scanline_figure,
    scanline_series_from_debug,
)

st.set_page_config(
    page_title="Gradient Noise Field",
    page_icon="~",
    layout="wide",
)


@st.cache_data(show_spinner=False)
def _field(
    *,
    width: int,
    height: int,
    cell_size: float,
    seed: int,
    octaves: int,
    persistence: float,
    frequency_multiplier: float,
) -> np.ndarray:
    params = OctaveParams(
        octave_count=int(octaves),
        persistence=float(persistence),
        frequency_multiplier=float(frequency_multiplier),
    )
    field = generate_field(int(width), int(height), float(cell_size), int(seed), params)
    return np.array(field.values)


@st.cache_resource(show_spinner=False)
def _grid(*, seed: int, grid_width: int, grid_height: int) -> GradientGrid:
    return GradientGrid.build(int(seed), int(grid_width), int(grid_height))


def _image_figure(img: np.ndarray, *, height: int = 520) -> go.Figure:
    if img.ndim == 2:
        img = np.repeat(img[..., None], 3, axis=2)
    fig = go.Figure(data=go.Image(z=img))
    fig.update_layout(margin=dict(l=0, r=0, t=0, b=0), height=int(height))
    fig.update_yaxes(showticklabels=False, showgrid=False)
    fig.update_xaxes(showticklabels=False, showgrid=False)
    return fig


def _histogram(z: np.ndarray) -> go.Figure:
    fig = go.Figure(
        data=go.Histogram(
            x=z.reshape(-1),
            nbinsx=80,
            marker=dict(color="rgba(255,255,255,0.75)"),
        )
    )
    for t in FOREST_TERRAIN.thresholds:
        fig.add_vline(x=t, line_dash="dot", line_color="#ffb000")
    fig.update_layout(
        margin=dict(l=0, r=0, t=30, b=0),
        height=260,
        title="Value distribution (palette band edges dotted)",
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
    )
    return fig


with st.sidebar:
    st.header("Field")
    width = st.slider("Width", 64, 1280, 640, step=32)
    height = st.slider("Height", 64, 720, 360, step=8)
    cell_size = st.slider("Cell size (px)", 4.0, 200.0, DEFAULT_CELL_SIZE, step=1.0)
    seed = st.number_input("Seed", min_value=0, value=DEFAULT_SEED, step=1)

    st.header("Octaves")
    octaves = st.slider("Octaves", 1, 8, DEFAULT_OCTAVES)
    persistence = st.slider("Persistence", 0.05, 1.0, DEFAULT_PERSISTENCE, step=0.05)
    frequency_multiplier = st.slider(
        "Frequency multiplier", 1.1, 4.0, DEFAULT_FREQUENCY_MULTIPLIER, step=0.1
    )

    st.header("Render")
    palette_name = st.radio("Palette", ["terrain", "gray"], horizontal=True)

st.title("Gradient Noise Field")

try:
    z = _field(
        width=width,
        height=height,
        cell_size=cell_size,
        seed=int(seed),
        octaves=octaves,
        persistence=persistence,
        frequency_multiplier=frequency_multiplier,
    )
except GradientNoiseError as exc:
    st.error(str(exc))
    st.stop()

img = terrain_rgb_u8(z) if palette_name == "terrain" else grayscale_u8(z)

left, right = st.columns([3, 1])
with left:
    st.plotly_chart(_image_figure(img), use_container_width=True)
with right:
    params = OctaveParams(octaves, persistence, frequency_multiplier)
    gw, gh = grid_dimensions(width, height, cell_size, params)
    st.metric("Gradient grid", f"{gw} x {gh}")
    st.metric("Amplitude sum", f"{params.amplitude_sum():.4f}")
    st.metric("Mean value", f"{float(np.mean(z)):.4f}")
    st.download_button(
        "Download PNG", array_to_png_bytes(img), file_name="field.png"
    )
    st.download_button(
        "Download .npy", array_to_npy_bytes(z), file_name="field.npy"
    )

st.plotly_chart(_histogram(z), use_container_width=True)

with st.expander("Step by step: one sample", expanded=False):
    grid = _grid(seed=int(seed), grid_width=gw, grid_height=gh)
    c1, c2 = st.columns(2)
    with c1:
        px = st.slider("Pixel x", 0, width - 1, min(width - 1, int(cell_size * 1.3)))
    with c2:
        py = st.slider("Pixel y", 0, height - 1, min(height - 1, int(cell_size * 0.6)))

    dbg = debug_point(px / cell_size, py / cell_size, grid)
    st.caption(
        f"grid-space ({dbg['input']['x']:.3f}, {dbg['input']['y']:.3f}) in cell "
        f"({dbg['cell']['xi0']}, {dbg['cell']['yi0']}); first octave noise "
        f"{dbg['noise']:.4f}"
    )
    a, b = st.columns(2)
    with a:
        st.plotly_chart(cell_figure(dbg), use_container_width=True)
    with b:
        st.plotly_chart(
            fade_curve_figure(t_value=dbg["relative"]["xf"], title="fade(x offset)"),
            use_container_width=True,
        )
        st.plotly_chart(
            fade_curve_figure(t_value=dbg["relative"]["yf"], title="fade(y offset)"),
            use_container_width=True,
        )
    st.plotly_chart(
        scanline_figure(scanline_series_from_debug(dbg)), use_container_width=True
    )
    st.plotly_chart(gradient_grid_figure(grid), use_container_width=True)
