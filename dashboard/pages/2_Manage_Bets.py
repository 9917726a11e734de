"""Manage Bets page: close and resolve markets, inspect votes."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import plotly.graph_objects as go
import streamlit as st
from dashboard.utils import (
    STATUS_BADGES,
    api_delete,
    api_get,
    api_patch,
    bets_frame,
    is_logged_in,
    sidebar_admin_login,
)

st.set_page_config(page_title="Manage Bets | SarradaBet", layout="wide")
sidebar_admin_login()

st.title("Manage Bets")

if not is_logged_in():
    st.info("Sign in from the sidebar to manage markets.")
    st.stop()

status = st.radio("Status", ["open", "closed", "resolved"], horizontal=True)
resp = api_get(f"/bets/status/{status}")

if not resp or not resp.get("data"):
    st.info(f"No {status} bets.")
    st.stop()

bets = resp["data"]
df = bets_frame(bets)
st.dataframe(df, use_container_width=True, hide_index=True)

st.markdown("---")

labels = {f"#{b['id']} {b['title']}": b for b in bets}
choice = st.selectbox("Bet", list(labels))
bet = labels[choice]

st.subheader(f"{STATUS_BADGES.get(bet['status'], '')} {bet['title']}")

# --- Votes per odd ---
fig = go.Figure(go.Bar(
    x=[o["title"] for o in bet["odds"]],
    y=[o.get("totalVotes", 0) for o in bet["odds"]],
    text=[f"@ {o['value']:.2f}" for o in bet["odds"]],
    textposition="auto",
))
fig.update_layout(yaxis_title="Votes", height=300, margin=dict(t=20, b=20))
st.plotly_chart(fig, use_container_width=True)

# --- Lifecycle actions ---
c1, c2, c3 = st.columns(3)

with c1:
    if bet["status"] == "open" and st.button("Close bet"):
        if api_patch(f"/bets/{bet['id']}/close"):
            st.success("Bet closed")
            st.rerun()

with c2:
    if bet["status"] != "resolved":
        # Keyed by id: odd titles are not unique within a bet
        odds = {f"#{o['id']} {o['title']}": o["id"] for o in bet["odds"]}
        winner = st.selectbox("Winning odd", list(odds))
        if st.button("Resolve bet"):
            if api_patch(f"/bets/{bet['id']}/resolve", {"winningOddId": odds[winner]}):
                st.success(f"Resolved: {winner} won")
                st.rerun()

with c3:
    if bet.get("totalVotes", 0) == 0 and bet["status"] != "resolved":
        if st.button("Delete bet", type="secondary"):
            if api_delete(f"/bets/{bet['id']}"):
                st.success("Bet deleted")
                st.rerun()
