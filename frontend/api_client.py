# frontend/api_client.py
"""Sayfaların ortak kullandığı API yardımcıları (oturum: st.session_state)."""
import os

import requests
import streamlit as st
from dotenv import load_dotenv

load_dotenv()

DEFAULT_API_BASE = os.getenv("API_BASE", "http://127.0.0.1:8000")


class ApiError(Exception):
    def __init__(self, message: str, status: int | None = None):
        self.status = status
        super().__init__(message)


def normalize_token(raw: str) -> str:
    s = str(raw or "").strip().strip('"').strip("'")
    # "Bearer ..." gelmişse sadece JWT'yi al
    if s.lower().startswith("bearer "):
        s = s.split(" ", 1)[1].strip()
    return s


def get_api():
    api_base = (st.session_state.get("api_base") or DEFAULT_API_BASE).strip().rstrip("/")
    token = normalize_token(st.session_state.get("jwt", ""))
    hdrs = {"Authorization": f"Bearer {token}"} if token else {}
    return api_base, token, hdrs


def _friendly(status: int, body: str) -> str:
    if status == 401:
        return "Unauthorized (401): please log in."
    if status == 403:
        return "Forbidden (403): missing permission."
    if status == 404:
        return "Not found (404)."
    if status >= 500:
        return f"Server error ({status})."
    return f"HTTP {status}: {body}"


def request(method: str, path: str, *, json=None, data=None, files=None, params=None, raw: bool = False):
    """Zarfı açar: {"ok": true, "data": ...} -> (data, meta). raw=True ise Response döner."""
    api_base, _, hdrs = get_api()
    try:
        r = requests.request(
            method, f"{api_base}{path}", headers=hdrs, json=json, data=data,
            files=files, params=params, timeout=30,
        )
    except requests.Timeout:
        raise ApiError("Request timed out.")
    except requests.ConnectionError:
        raise ApiError("Cannot connect: API is down or the URL is wrong.")

    if r.status_code >= 400:
        try:
            message = r.json().get("error") or r.text[:160]
        except ValueError:
            message = r.text[:160]
        raise ApiError(_friendly(r.status_code, message), r.status_code)

    if raw:
        return r
    body = r.json()
    return body.get("data"), body.get("meta") or {}


def get(path: str, **params):
    return request("GET", path, params={k: v for k, v in params.items() if v not in (None, "")})


def login(username: str, password: str) -> str:
    api_base, _, _ = get_api()
    r = requests.post(f"{api_base}/auth/login", data={"username": username, "password": password}, timeout=15)
    if r.status_code >= 400:
        raise ApiError("Invalid username or password", r.status_code)
    return normalize_token(r.json().get("access_token", ""))


def require_login():
    """Token yoksa sayfayı durdurur."""
    api_base, token, _ = get_api()
    with st.sidebar:
        st.info(f"API: {api_base}")
        st.write("JWT:", "✅" if token else "❌")
    if not token:
        st.warning("Log in from the Home page first.")
        st.stop()


def toast(msg: str, icon: str = "✅"):
    st.toast(msg, icon=icon)
