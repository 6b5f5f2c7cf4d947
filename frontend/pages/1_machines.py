# frontend/pages/1_machines.py
import pandas as pd
import streamlit as st

from api_client import ApiError, get, request, require_login, toast

st.set_page_config(page_title="Machines", layout="wide")
st.title("🏭 Machines")
require_login()

STATUSES = ["", "active", "has problems", "under maintenance", "inactive"]

# ===== 1) Liste =====
c1, c2 = st.columns([2, 1])
search = c1.text_input("Search (name / SAP / serial)")
status = c2.selectbox("Status", STATUSES)
try:
    machines, meta = get("/machines", q=search, status=status)
    df = pd.DataFrame(machines)
    if df.empty:
        st.info("No machines.")
    else:
        st.dataframe(df[["MachineID", "Name", "SAPNumber", "SerialNumber", "Location", "Status_s", "MachineGroupID"]],
                     use_container_width=True, height=280)
except ApiError as e:
    st.error(str(e))
    st.stop()

st.divider()

# ===== 2) Yeni makine =====
st.subheader("➕ New machine")
users, _ = get("/users")
user_opts = {"(none)": None, **{f"{u['FirstName']} {u['LastName']}": u["UserID"] for u in users or []}}
with st.form("form_machine", clear_on_submit=True):
    c1, c2, c3 = st.columns(3)
    name = c1.text_input("Name")
    sap = c2.text_input("SAP number")
    serial = c3.text_input("Serial number")
    c4, c5, c6 = st.columns(3)
    location = c4.text_input("Location")
    owner = c5.selectbox("Responsible", list(user_opts))
    machine_class = c6.text_input("Class")
    description = st.text_area("Description")
    submitted = st.form_submit_button("Create")
if submitted:
    try:
        data, _ = request("POST", "/machines", json={
            "Name": name, "SAPNumber": sap, "SerialNumber": serial, "Location": location,
            "UserID": user_opts[owner], "MachineClass": machine_class or None, "Description": description or None,
        })
        toast(f"Machine created (ID: {data['MachineID']})")
    except ApiError as e:
        st.error(str(e))

st.divider()

# ===== 3) Detay: dokümanlar + aksesuarlar =====
st.subheader("📄 Machine detail")
if machines:
    pick = st.selectbox("Machine", machines, format_func=lambda m: f"{m['Name']} ({m['SAPNumber']})")
    mid = pick["MachineID"]
    tab_docs, tab_acc, tab_cat = st.tabs(["Documents", "Accessories", "Categories"])

    with tab_docs:
        try:
            docs, _ = get(f"/machines/{mid}/documents")
            st.dataframe(pd.DataFrame(docs), use_container_width=True)
            c1, c2 = st.columns(2)
            if c1.button("Sync with folder"):
                res, _ = request("POST", f"/machines/{mid}/documents/sync")
                toast(f"+{res['added']} / -{res['removed']}")
            upload = c2.file_uploader("Upload")
            if upload is not None and c2.button("Save file"):
                request("POST", f"/machines/{mid}/documents", files={"file": (upload.name, upload.getvalue())})
                toast("Uploaded")
            for d in docs or []:
                r = request("GET", f"/documents/{d['DocumentID']}/download", raw=True)
                st.download_button(d["DocumentName"], r.content, d["DocumentName"], key=f"doc_{d['DocumentID']}")
        except ApiError as e:
            st.error(str(e))

    with tab_acc:
        for kind in ("generic", "special"):
            rows, _ = get(f"/machines/{mid}/accessories/{kind}")
            st.markdown(f"**{kind.title()} accessories**")
            st.dataframe(pd.DataFrame(rows), use_container_width=True)
        with st.form("form_acc", clear_on_submit=True):
            c1, c2, c3 = st.columns(3)
            kind = c1.selectbox("Kind", ["generic", "special"])
            acc_name = c2.text_input("Name")
            qty = c3.number_input("Quantity", min_value=0, value=1, step=1)
            if st.form_submit_button("Add accessory"):
                try:
                    request("POST", f"/machines/{mid}/accessories/{kind}", json={"Name": acc_name, "Quantity": int(qty)})
                    toast("Accessory added")
                except ApiError as e:
                    st.error(str(e))

    with tab_cat:
        cats, _ = get(f"/machines/{mid}/categories")
        st.write(", ".join(c["Name"] for c in cats or []) or "No categories.")
        new_cat = st.text_input("New category")
        if st.button("Add category") and new_cat:
            try:
                request("POST", f"/machines/{mid}/categories", json={"Name": new_cat})
                toast("Category added")
            except ApiError as e:
                st.error(str(e))
