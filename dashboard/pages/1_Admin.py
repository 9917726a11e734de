"""Admin page: counters plus forms to create categories and bets."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import pandas as pd
import streamlit as st
from dashboard.utils import api_get, api_post, is_logged_in, sidebar_admin_login

st.set_page_config(page_title="Admin | SarradaBet", layout="wide")
sidebar_admin_login()

st.title("Admin")

if not is_logged_in():
    st.info("Sign in from the sidebar to manage markets.")
    st.stop()

# --- Key metrics ---
stats = api_get("/admin/stats")
if stats:
    s = stats["data"]
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Bets",        s.get("totalBets", 0))
    c2.metric("Open bets",   s.get("activeBets", 0))
    c3.metric("Categories",  s.get("totalCategories", 0))
    c4.metric("Votes",       s.get("totalVotes", 0))

st.markdown("---")

col_cat, col_bet = st.columns([1, 2])

# --- New category ---
with col_cat:
    st.subheader("New category")
    with st.form("create_category", clear_on_submit=True):
        title = st.text_input("Title", max_chars=100)
        if st.form_submit_button("Create category") and title.strip():
            if api_post("/categories", {"title": title.strip()}):
                st.success(f"Category '{title.strip()}' created")

# --- New bet ---
with col_bet:
    st.subheader("New bet")
    categories_resp = api_get("/categories", {"limit": 100, "sortBy": "title", "sortOrder": "asc"})
    categories = {c["title"]: c["id"] for c in (categories_resp or {}).get("data", [])}

    if not categories:
        st.info("Create a category first.")
    else:
        with st.form("create_bet"):
            bet_title = st.text_input("Title", max_chars=50)
            description = st.text_area("Description", max_chars=1000)
            category = st.selectbox("Category", list(categories))
            st.caption("Odds: decimal values between 1.01 and 1000")
            odds_df = st.data_editor(
                pd.DataFrame([{"title": "", "value": 2.0}, {"title": "", "value": 2.0}]),
                num_rows="dynamic",
                use_container_width=True,
                key="odds_editor",
            )
            submitted = st.form_submit_button("Create bet")

        if submitted:
            odds = [
                {"title": str(row["title"]).strip(), "value": float(row["value"])}
                for _, row in odds_df.iterrows()
                if str(row["title"]).strip() and pd.notna(row["value"])
            ]
            if not odds:
                st.error("Add at least one odd")
            else:
                implied = sum(1 / o["value"] for o in odds if o["value"] > 0)
                st.caption(f"Total implied probability: {implied:.1%}")
                payload = {
                    "title": bet_title,
                    "description": description or None,
                    "categoryId": categories[category],
                    "odds": odds,
                }
                result = api_post("/bets", payload)
                if result:
                    st.success(f"Bet #{result['data']['bet']['id']} created")
