"""Shared utilities for all dashboard pages."""

import os
import pandas as pd
import requests
import streamlit as st
from dotenv import load_dotenv

load_dotenv()

_API_URL = os.getenv("API_URL", "http://localhost:8000").rstrip("/")
_API_PREFIX = "/api/v1"
_TIMEOUT = 15


def _token() -> str:
    return st.session_state.get("admin_token", "")


def _headers() -> dict:
    token = _token()
    return {"Authorization": f"Bearer {token}"} if token else {}


def _error_message(exc: requests.HTTPError) -> str:
    """Pull ``message`` (and field errors) out of the API error envelope."""
    try:
        body = exc.response.json()
    except ValueError:
        return str(exc)
    message = body.get("message", str(exc))
    errors = body.get("errors") or []
    details = [e["message"] if isinstance(e, dict) else str(e) for e in errors]
    return f"{message}: {'; '.join(details)}" if details else message


def _request(method: str, endpoint: str, params: dict = None, payload: dict = None):
    try:
        r = requests.request(
            method,
            f"{_API_URL}{_API_PREFIX}{endpoint}",
            headers=_headers(),
            params=params,
            json=payload,
            timeout=_TIMEOUT,
        )
        r.raise_for_status()
        return r.json()
    except requests.HTTPError as exc:
        st.error(f"API {exc.response.status_code}: {_error_message(exc)}")
        return None
    except Exception as exc:
        st.error(f"Request failed: {exc}")
        return None


def api_get(endpoint: str, params: dict = None):
    return _request("GET", endpoint, params=params)


def api_post(endpoint: str, payload: dict = None):
    return _request("POST", endpoint, payload=payload or {})


def api_put(endpoint: str, payload: dict):
    return _request("PUT", endpoint, payload=payload)


def api_patch(endpoint: str, payload: dict = None):
    return _request("PATCH", endpoint, payload=payload or {})


def api_delete(endpoint: str):
    return _request("DELETE", endpoint)


def is_logged_in() -> bool:
    return bool(_token())


def sidebar_admin_login() -> None:
    """Login form in the sidebar; stores the bearer token in session state."""
    with st.sidebar:
        if is_logged_in():
            st.caption(f"Signed in as **{st.session_state.get('admin_username', 'admin')}**")
            if st.button("Log out"):
                api_post("/admin/logout")
                for key in ("admin_token", "admin_username"):
                    st.session_state.pop(key, None)
                st.rerun()
            return

        with st.form("admin_login"):
            username = st.text_input("Username or email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign in")
        if submitted:
            result = api_post("/admin/login", {"username": username, "password": password})
            if result and result.get("success"):
                data = result["data"]
                st.session_state["admin_token"] = data["token"]["accessToken"]
                st.session_state["admin_username"] = data["username"]
                st.rerun()


def bets_frame(bets: list):
    """Flatten bets into a table: one row per odd."""
    rows = []
    for bet in bets:
        for odd in bet.get("odds", []):
            rows.append({
                "bet_id": bet["id"],
                "bet": bet["title"],
                "category": (bet.get("category") or {}).get("title"),
                "status": bet["status"],
                "odd_id": odd["id"],
                "odd": odd["title"],
                "value": odd["value"],
                "votes": odd.get("totalVotes", 0),
                "result": odd.get("result") or "",
            })
    return pd.DataFrame(rows)


STATUS_BADGES = {
    "open":     "🟢",
    "closed":   "🟡",
    "resolved": "🔵",
}
