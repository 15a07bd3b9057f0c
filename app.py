import json
from functools import partial
from pathlib import Path

import pandas as pd
import streamlit as st
import streamlit.components.v1 as components

from sunburst import (
    ChartConfig,
    SunburstError,
    SunburstNavigator,
    nodes_from_dataframe,
    parse_tree_json,
)
from sunburst.export import export_table, to_json_serializable
from sunburst.logging_config import get_logger, setup_logging

SAMPLE_DATA = Path(__file__).parent / "data" / "company_sales.json"

st.set_page_config(layout="wide")
st.title("📊 Sunburst Drill-Down (Sales/KPI/Any Hierarchy)")

st.sidebar.header("🛠️ Diagnostics")
verbose_logging = st.sidebar.checkbox(
    "Verbose logging",
    False,
    help="Log data loading and every navigation event to the console",
)
setup_logging(verbose=verbose_logging)
logger = get_logger("app")


def load_sample():
    return parse_tree_json(SAMPLE_DATA.read_text(encoding="utf-8"))


def read_table(uploaded_file):
    if uploaded_file.name.lower().endswith(".csv"):
        return pd.read_csv(uploaded_file)
    return pd.read_excel(uploaded_file)


def get_navigator(signature, build_nodes, config):
    """Navigator for this session, rebuilt when the data source changes"""
    if st.session_state.get("data_signature") != signature or "navigator" not in st.session_state:
        st.session_state["navigator"] = SunburstNavigator(build_nodes(), config)
        st.session_state["data_signature"] = signature
        st.session_state["search_text"] = ""
        logger.info("Loaded new tree for %s", signature[0])
    navigator = st.session_state["navigator"]
    if navigator.config != config:
        navigator.configure(config)
    return navigator


# Widget callbacks: each applies exactly one navigation event
def on_search():
    st.session_state["navigator"].search(st.session_state["search_text"])


def on_drill(index):
    st.session_state["navigator"].click(index)


def on_back():
    st.session_state["navigator"].back()


def on_jump(index):
    st.session_state["navigator"].jump(index)


def on_reset():
    st.session_state["navigator"].reset()
    st.session_state["search_text"] = ""


def on_highlight():
    label = st.session_state["highlight_label"]
    navigator = st.session_state["navigator"]
    navigator.hover(None if label == "None" else navigator.frame.labels.index(label))


# ---------------------------------------------------------------------------
# Sidebar: data source
# ---------------------------------------------------------------------------
st.sidebar.header("🧩 Data Source")
uploaded_file = st.sidebar.file_uploader(
    "Upload a JSON tree or an Excel/CSV table", type=["json", "xlsx", "csv"]
)

build_nodes = load_sample
signature = ("sample",)
if uploaded_file:
    if uploaded_file.name.lower().endswith(".json"):
        build_nodes = partial(parse_tree_json, uploaded_file.getvalue())
        signature = (uploaded_file.name, uploaded_file.size)
    else:
        df = read_table(uploaded_file)
        all_cols = df.columns.tolist()
        numeric_cols = df.select_dtypes(include="number").columns.tolist()

        st.sidebar.header("🪜 Hierarchy Configuration")
        default_hierarchy = all_cols[: min(3, len(all_cols))]
        hierarchy = st.sidebar.multiselect(
            "Select hierarchy columns (ordered)",
            all_cols,
            default=default_hierarchy,
            help="⚠️ **Required:** Select at least one column. First column = inner ring, second = next ring, etc.",
        )
        agg_method = st.sidebar.selectbox("Aggregation method", ["Count", "Sum"])
        value_col = None
        if agg_method == "Sum":
            value_col = st.sidebar.selectbox(
                "Select value column", numeric_cols if numeric_cols else all_cols, index=0
            )

        if not hierarchy:
            st.error("⚠️ **No columns selected for hierarchy!**")
            st.info("""
            **Please select at least one column** from the "Select hierarchy columns" dropdown in the sidebar.

            💡 **Tip:** The hierarchy determines the rings of the chart.
            - First column = Root level
            - Second column = Second level
            - And so on...
            """)
            st.stop()

        build_nodes = partial(nodes_from_dataframe, df, hierarchy, value_col)
        signature = (uploaded_file.name, uploaded_file.size, tuple(hierarchy), value_col)

# ---------------------------------------------------------------------------
# Sidebar: chart style
# ---------------------------------------------------------------------------
st.sidebar.header("🎨 Colour Settings")
depth_step = st.sidebar.slider(
    "Depth brightness step",
    min_value=0,
    max_value=80,
    value=40,
    help="How much lighter each drill-down level is than the one above",
)
max_shaded_depth = st.sidebar.slider(
    "Deepest shaded level",
    min_value=0,
    max_value=6,
    value=2,
    help="Levels below this reuse the lightest shade",
)
hover_amount = st.sidebar.slider(
    "Hover highlight",
    min_value=0,
    max_value=60,
    value=20,
    help="Brightness added to the segment under the pointer",
)

try:
    config = ChartConfig(
        depth_step=depth_step,
        max_shaded_depth=max_shaded_depth,
        hover_amount=hover_amount,
    )
    navigator = get_navigator(signature, build_nodes, config)
except SunburstError as e:
    logger.error("Could not load tree: %s", e)
    st.error(f"Could not load the data: {e}")
    st.stop()

frame = navigator.frame
summary = navigator.summary

# ---------------------------------------------------------------------------
# Header: navigation controls and search
# ---------------------------------------------------------------------------
st.header(f"🎯 {config.title}")

nav_cols = st.columns([1, 1, 4])
nav_cols[0].button("← Back", on_click=on_back, disabled=not navigator.can_go_back, use_container_width=True)
nav_cols[1].button("Reset", on_click=on_reset, type="primary", use_container_width=True)
nav_cols[2].text_input(
    "Filter by keyword...",
    key="search_text",
    on_change=on_search,
    placeholder="Filter by keyword...",
    label_visibility="collapsed",
)

crumbs = navigator.breadcrumbs
crumb_cols = st.columns(len(crumbs) + 1)
crumb_cols[0].markdown(f"**🗂️ {navigator.level_name}**")
for i, crumb in enumerate(crumbs):
    crumb_cols[i + 1].button(
        crumb.name,
        key=f"crumb_{i}",
        on_click=on_jump,
        args=(i,),
        disabled=i == len(crumbs) - 1,
    )

if navigator.clicked is not None:
    st.success(f"Clicked: {navigator.clicked.name}")

# ---------------------------------------------------------------------------
# Chart and breakdown
# ---------------------------------------------------------------------------
chart_col, side_col = st.columns([2, 1])

payload = to_json_serializable(frame)
payload["highlighted"] = navigator.highlighted
frame_json = json.dumps(payload, ensure_ascii=False).replace("</", r"<\/")

d3_html = f"""
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <script src="https://d3js.org/d3.v7.min.js"></script>
  <style>
  .tooltip {{
    position: absolute; background: rgba(0,0,0,0.9); color: #fff;
    padding: 12px 16px; border-radius: 12px; font-size: 13px; font-family: Calibri, Arial, sans-serif;
    pointer-events: none; z-index: 1000; max-width: 320px; line-height: 1.5;
  }}
  .center-total {{ font: 700 30px Calibri, Arial, sans-serif; fill: #111827; }}
  .center-label {{ font: 500 13px Calibri, Arial, sans-serif; fill: #6B7280; }}
  .empty {{ font: 500 15px Calibri, Arial, sans-serif; fill: #9CA3AF; }}
  </style>
</head>
<body>
<div id="chart"></div>
<script>
const frame = {frame_json};
const width = 560, height = 420;
const radius = Math.min(width, height) / 2 - 10;
const cutout = parseFloat("{config.cutout(navigator.depth)}") / 100;
const decimals = {config.percentage_decimals};

const svg = d3.select("#chart").append("svg")
  .attr("width", width).attr("height", height)
  .attr("viewBox", [-width / 2, -height / 2, width, height]);
const tooltip = d3.select("body").append("div").attr("class", "tooltip").style("opacity", 0);

const slices = frame.values.map((value, i) => ({{ i, value: Math.max(0, value) }}));
const pie = d3.pie().sort(null).value(d => d.value);
const arc = d3.arc().innerRadius(radius * cutout).outerRadius(radius).cornerRadius(4).padAngle(0.01);
const arcHover = d3.arc().innerRadius(radius * cutout).outerRadius(radius + 6).cornerRadius(4).padAngle(0.01);

svg.append("g")
  .selectAll("path")
  .data(pie(slices))
  .join("path")
  .attr("d", d => d.data.i === frame.highlighted ? arcHover(d) : arc(d))
  .attr("fill", d => d.data.i === frame.highlighted ? frame.hoverColors[d.data.i] : frame.colors[d.data.i])
  .attr("stroke", "#fff")
  .attr("stroke-width", 3)
  .on("mouseover", function(event, d) {{
    d3.select(this).attr("fill", frame.hoverColors[d.data.i]).attr("d", arcHover(d));
    const i = d.data.i;
    tooltip.style("opacity", 1).html(
      `<b>${{frame.labels[i]}}</b><br>${{frame.values[i].toLocaleString()}} (${{frame.percentages[i].toFixed(decimals)}}%)`
      + (frame.hasChildren[i] ? "<br><i>Has sub-categories</i>" : "")
    );
  }})
  .on("mousemove", event => tooltip.style("left", (event.pageX + 12) + "px").style("top", (event.pageY - 12) + "px"))
  .on("mouseout", function(event, d) {{
    const on = d.data.i === frame.highlighted;
    d3.select(this).attr("fill", on ? frame.hoverColors[d.data.i] : frame.colors[d.data.i]).attr("d", on ? arcHover(d) : arc(d));
    tooltip.style("opacity", 0);
  }});

if (frame.labels.length === 0) {{
  svg.append("text").attr("class", "empty").attr("text-anchor", "middle").text("No matching categories");
}} else {{
  const total = frame.values.reduce((a, b) => a + b, 0);
  svg.append("text").attr("class", "center-total").attr("text-anchor", "middle").attr("dy", "0.1em").text(total.toLocaleString());
  svg.append("text").attr("class", "center-label").attr("text-anchor", "middle").attr("dy", "1.8em").text("Total Value");
}}
</script>
</body>
</html>
"""

with chart_col:
    components.html(d3_html, height=440)
    st.caption("💡 Use the breakdown list to drill into a category, and the breadcrumbs to go back up.")

with side_col:
    st.subheader("📈 Data Breakdown")
    if not frame.labels:
        st.info("No categories match the current filter.")
    for i, label in enumerate(frame.labels):
        row = st.columns([3, 2, 1])
        marker = "▸ " if navigator.highlighted == i else ""
        row[0].markdown(
            f"<span style='color:{frame.colors[i]}'>●</span> {marker}**{label}**",
            unsafe_allow_html=True,
        )
        row[1].markdown(
            f"{frame.values[i]:,} · {frame.percentage(i):.{config.percentage_decimals}f}%"
        )
        if frame.has_children(i):
            row[2].button("⌄", key=f"drill_{navigator.depth}_{i}", on_click=on_drill, args=(i,), help="Drill down")
        else:
            row[2].button("•", key=f"select_{navigator.depth}_{i}", on_click=on_drill, args=(i,), help="Select")

    st.session_state["highlight_label"] = (
        "None" if navigator.highlighted is None else frame.labels[navigator.highlighted]
    )
    st.selectbox(
        "Highlight segment",
        ["None"] + list(frame.labels),
        key="highlight_label",
        on_change=on_highlight,
    )

    st.subheader("Summary Stats")
    stats = st.columns(2)
    stats[0].metric("Total Categories", summary.count)
    stats[1].metric("Largest Segment", f"{summary.max_value:,}")
    stats[0].metric("Average Value", f"{round(summary.average):,}")
    stats[1].metric("Current Level", len(navigator.history))

# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------
with st.expander("📥 Export Options Explained"):
    st.markdown("""
    **Export Options:**

    📊 **Current Level CSV**:
    - One row per visible segment: name, value, share of total, whether it has sub-categories
    - Respects the active keyword filter

    🌳 **Selected Node Tree (JSON)**:
    - The full subtree of the last clicked segment, in the same format the uploader accepts
    """)

csv = export_table(frame, config.percentage_decimals).to_csv(index=False)
st.sidebar.download_button("📥 Download Current Level CSV", csv, "sunburst_level.csv", "text/csv")
if navigator.clicked is not None:
    subtree_json = json.dumps(to_json_serializable(navigator.clicked.source), ensure_ascii=False, indent=2)
    st.sidebar.download_button(
        "🌳 Download Selected Node Tree (JSON)",
        subtree_json,
        f"node_tree_{navigator.clicked.name}.json",
        "application/json",
    )
