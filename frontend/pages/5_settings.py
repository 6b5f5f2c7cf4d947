# frontend/pages/5_settings.py
import pandas as pd
import streamlit as st

from api_client import ApiError, get, request, require_login, toast

st.set_page_config(page_title="Settings", layout="wide")
st.title("⚙️ Settings")
require_login()

try:
    cfg, _ = get("/config")
except ApiError as e:
    st.error(str(e))
    st.stop()

# ===== Uygulama ayarları =====
with st.form("form_config"):
    c1, c2 = st.columns(2)
    database = c1.text_input("Database path / URL", cfg.get("databasePath") or "")
    folder = c2.text_input("Documents folder", cfg.get("uploadFolderPath") or "")
    c3, c4, c5, c6 = st.columns(4)
    server = c3.text_input("SMTP server", cfg.get("smtpServer") or "")
    port = c4.number_input("SMTP port", min_value=1, max_value=65535, value=int(cfg.get("smtpPort") or 25))
    secure = c5.checkbox("Implicit TLS", value=bool(cfg.get("smtpSecure")))
    tls = c6.checkbox("STARTTLS", value=bool(cfg.get("smtpTLS")))
    c7, c8, c9 = st.columns(3)
    smtp_user = c7.text_input("SMTP username", cfg.get("smtpUsername") or "")
    smtp_pass = c8.text_input(
        "SMTP password", type="password",
        placeholder="(unchanged)" if cfg.get("smtpPasswordSet") else "",
    )
    sender = c9.text_input("From address", cfg.get("emailFrom") or "")
    if st.form_submit_button("Save"):
        try:
            request("PUT", "/config", json={
                "databasePath": database or None, "uploadFolderPath": folder or None,
                "smtpServer": server or None, "smtpPort": int(port), "smtpSecure": secure, "smtpTLS": tls,
                "smtpUsername": smtp_user or None, "smtpPassword": smtp_pass, "emailFrom": sender or None,
            })
            toast("Settings saved")
        except ApiError as e:
            st.error(str(e))

c1, c2 = st.columns([3, 1])
to = c1.text_input("Test e-mail to")
if c2.button("Send test") and to:
    res, _ = request("POST", "/notifications/test", json={"to": to})
    if res.get("sent"):
        toast("Test e-mail sent")
    else:
        st.error(res.get("error"))

st.divider()

# ===== Kullanıcılar =====
st.subheader("👤 Users")
users, _ = get("/users")
st.dataframe(pd.DataFrame(users), use_container_width=True)
with st.form("form_user", clear_on_submit=True):
    c1, c2, c3 = st.columns(3)
    username = c1.text_input("Username")
    first = c2.text_input("First name")
    last = c3.text_input("Last name")
    c4, c5 = st.columns(2)
    email = c4.text_input("E-mail")
    password = c5.text_input("Password", type="password")
    c6, c7 = st.columns(2)
    is_admin = c6.checkbox("Admin")
    ticket_perm = c7.checkbox("Ticket permissions")
    if st.form_submit_button("Create user"):
        try:
            request("POST", "/users", json={
                "Username": username, "FirstName": first, "LastName": last, "Email": email,
                "Password": password, "IsAdmin": is_admin, "TicketPermissions": ticket_perm,
            })
            toast("User created")
        except ApiError as e:
            st.error(str(e))
