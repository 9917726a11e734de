"""
Streamlit Dashboard for SarradaBet
Browse markets, filter them and vote on odds
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import plotly.express as px
import streamlit as st
from dashboard.utils import STATUS_BADGES, api_get, api_post, bets_frame

st.set_page_config(
    page_title="SarradaBet",
    page_icon="🎲",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.title("SarradaBet")

# ==============================================================================
# FILTERS
# ==============================================================================

categories_resp = api_get("/categories", {"limit": 100, "sortBy": "title", "sortOrder": "asc"})
categories = categories_resp["data"] if categories_resp else []
category_titles = {c["title"]: c["id"] for c in categories}

with st.sidebar:
    st.header("Filters")
    statuses = st.multiselect("Status", list(STATUS_BADGES), default=["open"])
    category = st.selectbox("Category", ["All"] + list(category_titles))
    search = st.text_input("Search title")
    limit = st.select_slider("Per page", [5, 10, 20, 50], value=10)
    page = st.number_input("Page", min_value=1, value=1, step=1)

params = {"page": page, "limit": limit}
if statuses:
    params["status"] = statuses
if category != "All":
    params["categoryId"] = category_titles[category]
if search:
    params["search"] = search

resp = api_get("/bets", params)

if not resp or not resp.get("data"):
    st.info("No bets found for this filter.")
    st.stop()

bets = resp["data"]
meta = resp.get("meta", {})
st.caption(
    f"Page {meta.get('page', 1)} of {max(meta.get('totalPages', 1), 1)} "
    f"· {meta.get('total', len(bets))} bets"
)

# ==============================================================================
# MARKETS
# ==============================================================================

for bet in bets:
    badge = STATUS_BADGES.get(bet["status"], "")
    with st.container(border=True):
        st.subheader(f"{badge} {bet['title']}")
        if bet.get("description"):
            st.caption(bet["description"])
        st.caption(
            f"{(bet.get('category') or {}).get('title', '—')} · "
            f"{bet.get('totalVotes', 0)} votes"
        )

        cols = st.columns(len(bet["odds"]) or 1)
        for col, odd in zip(cols, bet["odds"]):
            label = f"{odd['title']} @ {odd['value']:.2f}"
            if odd.get("result") == "won":
                col.success(f"{label} ✔")
            elif odd.get("result") == "lost":
                col.error(label)
            elif bet["status"] == "open":
                if col.button(label, key=f"vote-{odd['id']}"):
                    if api_post("/votes", {"oddId": odd["id"]}):
                        st.toast(f"Vote registered for {odd['title']}")
                        st.rerun()
            else:
                col.button(label, key=f"vote-{odd['id']}", disabled=True)

# ==============================================================================
# VOTE DISTRIBUTION
# ==============================================================================

st.markdown("---")
st.subheader("Vote distribution")

df = bets_frame(bets)
if df.empty or df["votes"].sum() == 0:
    st.info("No votes on this page yet.")
else:
    fig = px.bar(
        df,
        x="bet",
        y="votes",
        color="odd",
        hover_data=["value", "status"],
        labels={"bet": "Bet", "votes": "Votes", "odd": "Odd"},
    )
    fig.update_layout(barmode="stack", xaxis_tickangle=-30)
    st.plotly_chart(fig, use_container_width=True)
