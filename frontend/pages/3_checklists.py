# frontend/pages/3_checklists.py
import datetime as dt

import pandas as pd
import streamlit as st

from api_client import ApiError, get, request, require_login, toast

st.set_page_config(page_title="Checklists", layout="wide")
st.title("☑️ Checklists")
require_login()

INTERVALS = ["daily", "weekly", "monthly", "semi", "annually", "custom"]

machines, _ = get("/machines")
machine_opts = {f"{m['Name']} ({m['SAPNumber']})": m["MachineID"] for m in machines or []}

c1, c2, c3 = st.columns(3)
if c1.button("Refresh statuses"):
    res, _ = request("POST", "/checklists/refresh-status")
    toast(f"{res['late']} of {res['checked']} late")
days = c2.number_input("Notify horizon (days)", min_value=0, max_value=365, value=7)
if c3.button("Send reminders"):
    try:
        res, _ = request("POST", "/checklists/notify", json={"days": int(days)})
        toast(f"due {res['due']}, sent {res['sent']}, failed {res['failed']}")
    except ApiError as e:
        st.error(str(e))

checklists, _ = get("/checklists")
df = pd.DataFrame(checklists)
if not df.empty:
    st.dataframe(df[["ChecklistID", "Title", "MachineID", "MachineGroupID", "IntervalType",
                     "LastPerformedDate", "NextPlannedDate", "Status_s"]], use_container_width=True)

st.divider()

# ===== Yeni checklist =====
st.subheader("➕ New checklist")
if machine_opts:
    with st.form("form_checklist", clear_on_submit=True):
        c1, c2, c3 = st.columns(3)
        machine = c1.selectbox("Machine", list(machine_opts))
        interval = c2.selectbox("Interval", INTERVALS, index=2)
        custom_days = c3.number_input("Custom days", min_value=1, value=30)
        title = st.text_input("Title")
        items = st.text_area("Items (one per line)")
        last = st.date_input("Last completed", value=None)
        if st.form_submit_button("Create"):
            body = {
                "MachineID": machine_opts[machine], "Title": title, "IntervalType": interval,
                "CustomIntervalDays": int(custom_days) if interval == "custom" else None,
                "items": [{"Description": line.strip()} for line in items.splitlines() if line.strip()],
            }
            if last:
                body["LastCompletedDate"] = dt.datetime.combine(last, dt.time()).isoformat()
            try:
                request("POST", "/checklists", json=body)
                toast("Checklist created")
            except ApiError as e:
                st.error(str(e))

st.divider()

# ===== Uygula =====
st.subheader("✅ Perform checklist")
if checklists:
    cl = st.selectbox("Checklist", checklists, format_func=lambda c: f"{c['Title']} (next: {c['NextPlannedDate']})")
    for item in cl["items"]:
        done = st.checkbox(item["Description"], value=item["Completed"], key=f"item_{item['ItemID']}")
        if done != item["Completed"]:
            request("PATCH", f"/checklists/items/{item['ItemID']}", json={"Completed": done})
    notes = st.text_input("Notes")
    if st.button("Complete checklist"):
        try:
            res, _ = request("POST", f"/checklists/{cl['ChecklistID']}/complete", json={"Notes": notes or None})
            toast(f"Recorded ({res['Status_s']})")
        except ApiError as e:
            st.error(str(e))

    if cl["MachineID"]:
        st.markdown("**History**")
        history, _ = get(f"/machines/{cl['MachineID']}/checklist-history")
        st.dataframe(pd.DataFrame(history), use_container_width=True)
