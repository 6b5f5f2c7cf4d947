# frontend/pages/2_tickets.py
import datetime as dt

import pandas as pd
import streamlit as st

from api_client import ApiError, get, request, require_login, toast

st.set_page_config(page_title="Tickets", layout="wide")
st.title("🛠️ Maintenance tickets")
require_login()

machines, _ = get("/machines")
users, _ = get("/users")
machine_opts = {f"{m['Name']} ({m['SAPNumber']})": m["MachineID"] for m in machines or []}
user_opts = {"(none)": None, **{f"{u['FirstName']} {u['LastName']}": u["UserID"] for u in users or []}}

# ===== 1) Yeni ticket =====
st.subheader("➕ New ticket")
if not machine_opts:
    st.info("Create a machine first.")
else:
    with st.form("form_ticket", clear_on_submit=True):
        c1, c2 = st.columns(2)
        machine = c1.selectbox("Machine", list(machine_opts))
        assignee = c2.selectbox("Assignee", list(user_opts))
        title = st.text_input("Title")
        description = st.text_area("Description")
        c3, c4, c5 = st.columns(3)
        day = c3.date_input("Scheduled date", dt.date.today() + dt.timedelta(days=1))
        hour = c4.time_input("Time", dt.time(8, 0))
        critical = c5.checkbox("Critical")
        submitted = st.form_submit_button("Create")
    if submitted:
        try:
            data, _ = request("POST", "/tickets", json={
                "MachineID": machine_opts[machine], "UserID": user_opts[assignee], "Title": title,
                "Description": description, "Critical": critical,
                "ScheduledDate": dt.datetime.combine(day, hour).isoformat(),
            })
            toast(f"Ticket #{data['TicketID']} created")
        except ApiError as e:
            st.error(str(e))

st.divider()

# ===== 2) Liste =====
st.subheader("📋 Tickets")
c1, c2 = st.columns(2)
status = c1.selectbox("Status", ["", "pending", "in progress", "late", "completed", "completed late"])
if c2.button("Mark overdue tickets"):
    try:
        res, _ = request("POST", "/tickets/mark-overdue")
        toast(f"{res['updated']} ticket(s) marked late")
    except ApiError as e:
        st.error(str(e))
tickets, _ = get("/tickets", status=status)
df = pd.DataFrame(tickets)
if df.empty:
    st.info("No tickets.")
else:
    st.dataframe(df[["TicketID", "Title", "MachineID", "UserID", "Status_s", "ScheduledDate", "Critical"]],
                 use_container_width=True, height=280)

st.divider()

# ===== 3) Kapat + rapor =====
st.subheader("✅ Complete / report")
if tickets:
    t = st.selectbox("Ticket", tickets, format_func=lambda x: f"#{x['TicketID']} {x['Title']} ({x['Status_s']})")
    with st.form("form_complete"):
        notes = st.text_area("Completion notes")
        external = st.checkbox("External intervention")
        if st.form_submit_button("Complete"):
            try:
                request("POST", f"/tickets/{t['TicketID']}/complete",
                        json={"CompletionNotes": notes or None, "External": external})
                toast("Ticket completed")
            except ApiError as e:
                st.error(str(e))

    with st.form("form_report"):
        problem = st.text_area("Problem")
        solution = st.text_area("Solution")
        extra = st.text_area("Notes")
        c1, c2 = st.columns(2)
        save = c1.checkbox("Save to machine documents")
        mail = c2.checkbox("E-mail to assignee")
        if st.form_submit_button("Generate PDF"):
            body = {"problem": problem, "solution": solution, "notes": extra or None,
                    "save_to_documents": save, "email": mail}
            try:
                if save:
                    info, _ = request("POST", f"/tickets/{t['TicketID']}/report", json=body)
                    toast(f"Saved: {info['filename']}")
                else:
                    r = request("POST", f"/tickets/{t['TicketID']}/report", json=body, raw=True)
                    st.session_state["report_pdf"] = r.content
            except ApiError as e:
                st.error(str(e))
    if st.session_state.get("report_pdf"):
        st.download_button("Download report", st.session_state["report_pdf"], "maintenance_report.pdf",
                           "application/pdf")
