# frontend/Home.py
import datetime as dt
import time

import pandas as pd
import plotly.graph_objects as go
import requests
import streamlit as st

from api_client import DEFAULT_API_BASE, ApiError, get, get_api, login, normalize_token

st.set_page_config(page_title="Upkeep", layout="wide")

if "jwt" not in st.session_state:
    st.session_state["jwt"] = ""

st.title("Upkeep Bakım Panosu")

# --------- Sidebar: Ayarlar / Giriş / Sağlık ---------
with st.sidebar:
    st.header("Settings")
    st.text_input("API base", value=DEFAULT_API_BASE, key="api_base")

    st.divider()
    st.subheader("Login")
    username = st.text_input("Username", key="user")
    password = st.text_input("Password", type="password", key="pass")
    c1, c2 = st.columns(2)
    if c1.button("Log in", key="btn_login"):
        try:
            st.session_state["jwt"] = login(username, password)
            st.success("Logged in.")
        except (ApiError, requests.RequestException) as e:
            st.error(f"Login failed: {e}")
    if c2.button("Log out", key="btn_logout"):
        st.session_state["jwt"] = ""
        st.info("Logged out.")

    with st.expander("Forgot password"):
        email = st.text_input("E-mail", key="reset_email")
        if st.button("Send code", key="btn_reset_req"):
            api_base, _, _ = get_api()
            requests.post(f"{api_base}/auth/password-reset/request", json={"email": email}, timeout=15)
            st.info("If the address is registered, a code was sent.")
        code = st.text_input("Code", key="reset_code")
        new_pw = st.text_input("New password", type="password", key="reset_pw")
        if st.button("Reset", key="btn_reset_confirm"):
            api_base, _, _ = get_api()
            r = requests.post(f"{api_base}/auth/password-reset/confirm",
                              json={"email": email, "code": code, "new_password": new_pw}, timeout=15)
            if r.ok:
                st.success("Password changed.")
            else:
                st.error(r.json().get("error", r.text[:160]))

    st.divider()
    st.subheader("API health")
    api_base, token, _ = get_api()
    try:
        h = requests.get(f"{api_base}/health", timeout=5)
        h.raise_for_status()
        st.success("API: OK")
    except requests.RequestException as e:
        st.error(f"API unreachable: {e}")

TOKEN = normalize_token(st.session_state.get("jwt", ""))
if not TOKEN:
    st.warning("Log in from the sidebar to see statistics.")
    st.stop()


# --------- Filtreler ---------
@st.cache_data(ttl=30)
def load_machines(_token: str):
    data, _ = get("/machines")
    return data or []


@st.cache_data(ttl=30)
def load_statistics(_token: str, machine_id, date_from: str, date_to: str):
    data, _ = get("/statistics", machine_id=machine_id, date_from=date_from, date_to=date_to)
    return data


def _empty_fig(height=320, text="No data"):
    fig = go.Figure()
    fig.update_layout(margin=dict(l=10, r=10, t=30, b=10), height=height)
    fig.add_annotation(text=text, x=0.5, y=0.5, xref="paper", yref="paper", showarrow=False)
    return fig


status = st.empty()
try:
    machines = load_machines(TOKEN)
    names = {"All machines": None, **{f"{m['Name']} ({m['SAPNumber']})": m["MachineID"] for m in machines}}

    c1, c2, c3, c4 = st.columns([2, 1, 1, 1])
    choice = c1.selectbox("Machine", list(names))
    start = c2.date_input("From", dt.date.today() - dt.timedelta(days=365))
    end = c3.date_input("To", dt.date.today())
    if c4.button("Refresh"):
        st.cache_data.clear()

    stats = load_statistics(TOKEN, names[choice], f"{start}T00:00:00", f"{end}T23:59:59")
    st.metric("Tickets", stats["ticketCount"])

    left, right = st.columns(2)

    # ===== Kök neden =====
    with left:
        st.subheader("Root cause")
        df = pd.DataFrame(stats["rootCause"])
        if df.empty:
            st.plotly_chart(_empty_fig(), use_container_width=True, key="chart_cause")
        else:
            fig = go.Figure(data=[go.Pie(labels=df["cause"], values=df["count"], hole=0.4)])
            fig.update_layout(margin=dict(l=10, r=10, t=30, b=10), height=320)
            st.plotly_chart(fig, use_container_width=True, key="chart_cause")

    # ===== Aylık müdahale sayısı =====
    with right:
        st.subheader("Interventions per month")
        df = pd.DataFrame(stats["interventionCount"])
        if df.empty:
            st.plotly_chart(_empty_fig(), use_container_width=True, key="chart_count")
        else:
            fig = go.Figure(data=[go.Bar(x=df["month"], y=df["count"], text=df["count"], textposition="outside")])
            fig.update_layout(margin=dict(l=10, r=10, t=30, b=10), height=320)
            st.plotly_chart(fig, use_container_width=True, key="chart_count")

    left, right = st.columns(2)

    # ===== İç / dış müdahale =====
    with left:
        st.subheader("Internal vs external")
        df = pd.DataFrame(stats["interventionType"])
        if df.empty:
            st.plotly_chart(_empty_fig(), use_container_width=True, key="chart_type")
        else:
            fig = go.Figure(data=[
                go.Bar(x=df["month"], y=df["internal"], name="Internal"),
                go.Bar(x=df["month"], y=df["external"], name="External"),
            ])
            fig.update_layout(barmode="stack", margin=dict(l=10, r=10, t=30, b=10), height=320)
            st.plotly_chart(fig, use_container_width=True, key="chart_type")

    # ===== Duruş saatleri =====
    with right:
        st.subheader("Equipment downtime (h)")
        df = pd.DataFrame(stats["equipmentDowntime"])
        if df.empty:
            st.plotly_chart(_empty_fig(), use_container_width=True, key="chart_down")
        else:
            fig = go.Figure(data=[go.Scatter(x=df["month"], y=df["hours"], mode="lines+markers")])
            fig.update_layout(margin=dict(l=10, r=10, t=30, b=10), height=320)
            st.plotly_chart(fig, use_container_width=True, key="chart_down")
            st.download_button("Download CSV", df.to_csv(index=False).encode("utf-8"),
                               "downtime.csv", "text/csv", key="dl_down")

    status.success("Ready: " + time.strftime("%H:%M:%S"))
except ApiError as ex:
    status.error(f"Error: {ex}")
    st.info("Check the API base and your login in the sidebar.")
