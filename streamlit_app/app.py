# streamlit_app/app.py
import streamlit as st
import requests, os
import matplotlib.pyplot as plt
import pandas as pd

API_BASE = os.environ.get("API_BASE", "http://localhost:3000")

st.set_page_config(page_title="CarbonAPI", layout="wide", initial_sidebar_state="expanded")

# -------------------------------
# Helpers
# -------------------------------
def post_json(path: str, payload: dict):
    url = API_BASE.rstrip("/") + path
    return requests.post(url, json=payload, headers={"User-ID": st.session_state.get("user_id", "anonymous")}, timeout=30)

def get_json(path: str, params: dict = None):
    url = API_BASE.rstrip("/") + path
    resp = requests.get(url, params=params or {}, timeout=30)
    resp.raise_for_status()
    return resp.json()

def show_result(data):
    st.metric("Carbon footprint", f'{data["carbon_footprint"]} kg CO2e')
    c1, c2 = st.columns(2)
    with c1:
        st.subheader("Breakdown")
        st.json(data.get("breakdown", {}))
    with c2:
        st.subheader("Calculation")
        st.code(data.get("calculation", {}).get("formula", ""))
        st.json(data.get("calculation", {}).get("values", {}))
    tips = data.get("suggestions") or []
    if tips:
        st.subheader("Suggestions")
        for t in tips:
            st.write("- " + t)

# -------------------------------
# Sidebar
# -------------------------------
st.sidebar.title("CarbonAPI")
st.session_state["user_id"] = st.sidebar.text_input("User ID", value=st.session_state.get("user_id", "anonymous"))
try:
    health = get_json("/health")
    st.sidebar.success(f'{health["service"]} {health["version"]}: {health["status"]}')
except Exception as e:
    st.sidebar.error(f"API unreachable: {e}")

try:
    activities = get_json("/api/v1/activities")["activities"]
except Exception:
    activities = {}

tab_calc, tab_factors, tab_analytics = st.tabs(["Calculator", "Emission Factors", "Analytics"])

# -------------------------------
# Calculator tab
# -------------------------------
with tab_calc:
    st.header("Calculate a footprint")
    activity = st.selectbox("Activity", list(activities) + ["other"])
    info = activities.get(activity, {})
    if info:
        st.caption(info.get("description", ""))

    with st.form("calc_form"):
        payload = {"activity": activity}
        if activity == "shipping":
            payload["mode"] = st.selectbox("Transport mode", info.get("transport_modes", []))
            payload["weight"] = st.number_input("Weight (kg)", min_value=0.0, value=500.0)
            payload["distance"] = st.number_input("Distance (km, 0 = estimate from locations)", min_value=0.0, value=0.0)
            payload["from"] = st.text_input("From", value="NYC")
            payload["to"] = st.text_input("To", value="London")
        elif activity in ("electricity", "fuel"):
            options = info.get("energy_sources") or info.get("fuel_types") or []
            payload["mode"] = st.selectbox("Source / fuel type", options)
            payload["amount"] = st.number_input("Amount", min_value=0.0, value=100.0)
            payload["unit"] = st.text_input("Unit", value="kwh" if activity == "electricity" else "liters")
        else:
            payload["activity"] = st.text_input("Activity name", value="commute")
            payload["amount"] = st.number_input("Amount", min_value=0.0, value=10.0)
        submitted = st.form_submit_button("Calculate")

    if submitted:
        try:
            r = post_json("/api/v1/calculate", payload)
            if r.ok:
                show_result(r.json())
            else:
                st.error(r.json().get("message", r.text))
        except Exception as e:
            st.error(f"Calculation failed: {e}")

# -------------------------------
# Factors tab
# -------------------------------
with tab_factors:
    st.header("Emission factors")
    try:
        data = get_json("/api/v1/factors")
        df = pd.DataFrame(data["emission_factors"])
        st.caption("Sources: " + data.get("source", ""))
        st.dataframe(df, use_container_width=True)
    except Exception as e:
        st.error("Could not fetch factors: " + str(e))

# -------------------------------
# Analytics tab
# -------------------------------
with tab_analytics:
    st.header("Usage analytics")
    try:
        stats = get_json("/api/v1/analytics")["analytics"]
    except Exception as e:
        st.error("Could not fetch analytics: " + str(e))
        stats = None

    if stats:
        m1, m2, m3 = st.columns(3)
        m1.metric("Calculations", stats["total_calculations"])
        m2.metric("Avg response (ms)", stats["avg_response_time_ms"])
        m3.metric("Total kg CO2e", stats["total_carbon_calculated"])

        top = pd.DataFrame(list(stats["top_activities"].items()), columns=["activity", "count"])
        if top.empty:
            st.info("No calculations recorded yet.")
        else:
            fig, ax = plt.subplots()
            ax.bar(top["activity"], top["count"])
            ax.set_title("Top activities")
            ax.set_xlabel("Activity")
            ax.set_ylabel("Calculations")
            st.pyplot(fig)
