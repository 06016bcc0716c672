import plotly.express as px
import pandas as pd

def export_set_chart(per_set, path: str):
    if not per_set:
        with open(path, "w") as f:
            f.write("<h1>Cache Sets</h1><p>No data to display.</p>")
        return

    df = pd.DataFrame(per_set)
    df['hits'] = pd.to_numeric(df['hits'], errors='coerce').fillna(0).astype(int)
    df['misses'] = pd.to_numeric(df['misses'], errors='coerce').fillna(0).astype(int)

    # One row per (set, outcome) for a grouped bar chart
    long_df = df.melt(id_vars=['set'], value_vars=['hits', 'misses'],
                      var_name='outcome', value_name='count')

    fig = px.bar(
        long_df,
        x="set",
        y="count",
        color="outcome",
        barmode="group",
        title="Cache Simulation: Hits and Misses per Set",
        labels={"set": "Set Index", "count": "Accesses", "outcome": "Outcome"},
        color_discrete_map={"hits": "#2ca02c", "misses": "#d62728"},
    )

    fig.update_xaxes(type="category")
    fig.update_layout(
        font=dict(family="Courier New, monospace", size=12),
        legend_title="Outcome"
    )

    fig.write_html(path, include_plotlyjs="cdn", full_html=True)

def export_set_chart_ascii(per_set, width: int = 60):
    if not per_set:
        return "No sets to display."

    max_total = max((item['hits'] + item['misses'] for item in per_set), default=0)
    if max_total == 0:
        return "No accesses recorded."

    scale = width / max_total

    chart = "Cache Simulation: Accesses per Set (H = hit, M = miss)\n"
    chart += "-" * (width + 20) + "\n"

    for item in per_set:
        hit_chars = int(round(item['hits'] * scale))
        miss_chars = int(round(item['misses'] * scale))
        bar = "H" * hit_chars + "M" * miss_chars
        chart += f"{item['set']:>6} |{bar:<{width}} {item['hits']}/{item['misses']}\n"

    chart += "-" * (width + 20) + "\n"
    return chart
