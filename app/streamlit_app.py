from __future__ import annotations

import plotly.express as px
import streamlit as st

from common import available_seasons, load_matches_cached, season_date_range, season_records, settings_cached
from epl_standings.data.inputs import format_season
from epl_standings.errors import EmptyMatchLogError
from epl_standings.features.standings import compute_cumulative_points, compute_standings, standings_frame


st.set_page_config(page_title="Premier League — Standings", page_icon="🏆", layout="wide")

settings = settings_cached()
processed_path = str(settings.processed_path)

# Load dataset
try:
    df = load_matches_cached(processed_path)
except Exception as e:  # noqa: BLE001
    st.error("Dataset not found. Run first: `python -m scripts.download_data`")
    st.exception(e)
    st.stop()

seasons = available_seasons(df)
if not seasons:
    st.info("The processed dataset holds no season.")
    st.stop()

st.markdown("# 🏆 Premier League standings")

col_season, col_date, col_idle = st.columns([1, 1, 1])
with col_season:
    season = st.selectbox("Season", options=seasons, index=0, format_func=format_season)
date_range = season_date_range(df, season)
if date_range is None:
    st.info("No match of this season has a usable date.")
    st.stop()
first_day, last_day = date_range
with col_date:
    cutoff = st.date_input("Standings as of", value=last_day, min_value=first_day, max_value=last_day)
with col_idle:
    include_idle = st.checkbox("Show teams without a match yet", value=False)

records = season_records(df, season)

try:
    rows = compute_standings(records, cutoff=cutoff, last_n=settings.form_n, include_idle_teams=include_idle)
except EmptyMatchLogError:
    st.info("No match was played on or before this date.")
    st.stop()

table = standings_frame(rows)

st.dataframe(
    table,
    hide_index=True,
    use_container_width=True,
    column_config={
        "rank": st.column_config.NumberColumn("#", width="small"),
        "team": st.column_config.TextColumn("Team"),
        "record": st.column_config.TextColumn("Record"),
        "home_record": st.column_config.TextColumn("Home"),
        "away_record": st.column_config.TextColumn("Away"),
        "matches_played": st.column_config.NumberColumn("MP", width="small"),
        "points": st.column_config.NumberColumn("Pts", width="small"),
        "ppm": st.column_config.NumberColumn("PPM", format="%.3f"),
        "pt_pct": st.column_config.NumberColumn("Pt%", format="%.3f"),
        "goals_scored": st.column_config.NumberColumn("GS", width="small"),
        "gsm": st.column_config.NumberColumn("GSM", format="%.3f"),
        "goals_allowed": st.column_config.NumberColumn("GA", width="small"),
        "gam": st.column_config.NumberColumn("GAM", format="%.3f"),
        "last10": st.column_config.TextColumn(f"Last {settings.form_n}"),
        "streak": st.column_config.TextColumn("Streak"),
    },
)

st.markdown("---")
st.subheader("📈 Cumulative points")

team = st.selectbox("Team", options=table["team"].tolist(), index=0)
trend = compute_cumulative_points(records, cutoff=cutoff, team=team)

if trend.empty:
    st.info("No match for this team yet.")
    st.stop()

fig = px.line(trend, x="date", y="cum_points", markers=True, hover_data=["opponent", "context", "outcome"])
fig.update_layout(
    height=380,
    margin=dict(l=10, r=10, t=20, b=10),
    xaxis_title="Date",
    yaxis_title="Points",
)

st.plotly_chart(fig, use_container_width=True)

st.caption("Ranking: points per match → wins → goals scored per match → goals allowed per match (lowest first).")
