# frontend/pages/4_spare_parts.py
import pandas as pd
import streamlit as st

from api_client import ApiError, get, request, require_login, toast

st.set_page_config(page_title="Spare parts", layout="wide")
st.title("🔩 Spare parts")
require_login()

# ===== Yeniden sipariş =====
st.subheader("⚠️ Below reorder level")
c1, c2 = st.columns(2)
limit = c1.number_input("Limit", min_value=1, max_value=500, value=50, step=10)
skip = c2.number_input("Skip", min_value=0, value=0, step=10)
try:
    rows, meta = get("/spare-parts/below-reorder", skip=int(skip), limit=int(limit))
    df = pd.DataFrame(rows)
    st.caption(f"Total: {meta.get('total', 0)}")
    if df.empty:
        st.success("All parts above reorder level.")
    else:
        st.dataframe(df[["PartNumber", "Name", "Quantity", "ReorderLevel", "Gap", "Location", "Supplier"]],
                     use_container_width=True)
        st.download_button("Download CSV", df.to_csv(index=False).encode("utf-8"), "reorder.csv", "text/csv")
except ApiError as e:
    st.error(str(e))

st.divider()

st.subheader("📦 All parts")
parts, _ = get("/spare-parts")
st.dataframe(pd.DataFrame(parts), use_container_width=True, height=260)

st.subheader("➕ New part")
machines, _ = get("/machines")
machine_opts = {"(none)": None, **{f"{m['Name']} ({m['SAPNumber']})": m["MachineID"] for m in machines or []}}
with st.form("form_part", clear_on_submit=True):
    c1, c2, c3 = st.columns(3)
    number = c1.text_input("Part number")
    name = c2.text_input("Name")
    machine = c3.selectbox("Machine", list(machine_opts))
    c4, c5, c6, c7 = st.columns(4)
    qty = c4.number_input("Quantity", min_value=0, value=1)
    reorder = c5.number_input("Reorder level", min_value=1, value=1)
    location = c6.text_input("Location")
    supplier = c7.text_input("Supplier")
    if st.form_submit_button("Create"):
        try:
            request("POST", "/spare-parts", json={
                "PartNumber": number, "Name": name, "MachineID": machine_opts[machine],
                "Quantity": int(qty), "ReorderLevel": int(reorder),
                "Location": location or None, "Supplier": supplier or None,
            })
            toast("Part created")
        except ApiError as e:
            st.error(str(e))
