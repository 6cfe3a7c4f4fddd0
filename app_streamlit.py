import base64
import os
from datetime import datetime

import pandas as pd
import streamlit as st

from client import HealthBuddyClient, export_history
from quiz_rules import BASE_QUESTION, build_symptom_description

API_URL = os.getenv("HEALTHBUDDY_API_URL", "http://127.0.0.1:5000")

SEVERITY_BADGES = {
    "emergency": "🚨 Emergency",
    "serious": "🟠 Serious",
    "moderate": "🟡 Moderate",
    "mild": "🟢 Mild",
}

st.set_page_config(page_title="HealthBuddy", page_icon="🩺", layout="centered")

if "client" not in st.session_state:
    st.session_state.client = HealthBuddyClient(API_URL)
    st.session_state.history = []
    st.session_state.quiz_answers = {}
    st.session_state.quiz_questions = [BASE_QUESTION]
    st.session_state.quiz_step = 0
    st.session_state.chat = []
client: HealthBuddyClient = st.session_state.client


def show_advice(advice):
    st.subheader(SEVERITY_BADGES.get(advice.severity.value, advice.severity.value))
    if advice.severity.value == "emergency":
        st.error("Tell an adult right away and call emergency services (911).")
    st.write(advice.explanation)
    st.markdown("**What you can do**")
    for rec in advice.recommendations:
        st.write("•", rec)
    st.markdown("**See a doctor if**")
    for reason in advice.doctor_reasons:
        st.write("•", reason)
    if advice.follow_up_questions:
        st.markdown("**Questions to think about**")
        for q in advice.follow_up_questions:
            st.write("•", q)
    if advice.safety_notes:
        st.caption(advice.safety_notes)


def ask(description, image_data=None):
    advice = client.get_symptom_advice(description, image_data)
    st.session_state.history.insert(0, {
        "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M"),
        "symptoms": description,
        "severity": advice.severity.value,
        "explanation": advice.explanation,
    })
    return advice


st.title("🩺 HealthBuddy")
st.info("HealthBuddy gives general tips, not a diagnosis. Always tell a trusted adult how you feel.")

page = st.sidebar.radio("Go to", ["Quiz", "Chat", "History", "Account"])

if page == "Quiz":
    questions = st.session_state.quiz_questions
    step = st.session_state.quiz_step
    st.progress((step + 1) / (len(questions) + 1))

    if step < len(questions):
        q = questions[step]
        choice = st.radio(q.question, q.options, key=f"quiz-{step}-{q.id}")
        if st.button("Next"):
            st.session_state.quiz_answers[q.id] = choice
            if q.id in ("symptom-type", "location"):
                answered = st.session_state.quiz_answers
                follow_ups = [f for f in client.fetch_next_questions(answered) if f.id not in answered]
                # Keep the remaining questions when nothing new comes back
                if follow_ups:
                    st.session_state.quiz_questions = questions[:step + 1] + follow_ups
            st.session_state.quiz_step += 1
            st.rerun()
    else:
        description = build_symptom_description(st.session_state.quiz_answers)
        st.caption(description)
        if st.session_state.get("quiz_advice") is None:
            with st.spinner("Thinking..."):
                st.session_state.quiz_advice = ask(description)
        show_advice(st.session_state.quiz_advice)
        if st.button("Start over"):
            st.session_state.quiz_advice = None
            st.session_state.quiz_answers = {}
            st.session_state.quiz_questions = [BASE_QUESTION]
            st.session_state.quiz_step = 0
            st.rerun()

elif page == "Chat":
    photo = st.file_uploader("Add a photo (optional)", type=["png", "jpg", "jpeg"])
    for role, text in st.session_state.chat:
        with st.chat_message(role):
            st.write(text)
    message = st.chat_input("Tell me how you feel")
    if message:
        image_data = base64.b64encode(photo.getvalue()).decode("ascii") if photo else None
        st.session_state.chat.append(("user", message))
        with st.chat_message("user"):
            st.write(message)
        with st.chat_message("assistant"):
            advice = ask(message, image_data)
            show_advice(advice)
        st.session_state.chat.append(("assistant", advice.explanation))

elif page == "History":
    if st.session_state.history:
        df = pd.DataFrame(st.session_state.history)
        st.dataframe(df, use_container_width=True)
        if st.button("Clear history"):
            st.session_state.history = []
            st.rerun()
    else:
        st.info("No history yet.")

else:
    status = client.status()
    if status.get("authenticated"):
        st.success(f"Signed in as {status['username']} ({status.get('historyCount', 0)} checks)")
        if st.button("Log out"):
            client.logout()
            st.rerun()
        if st.button("Delete account", type="secondary"):
            result = client.delete_account()
            if result.get("success"):
                st.session_state.history = []
                st.session_state.chat = []
                st.session_state.quiz_answers = {}
                st.session_state.quiz_questions = [BASE_QUESTION]
                st.session_state.quiz_step = 0
                st.session_state.quiz_advice = None
                st.rerun()
            else:
                st.warning(result.get("error", "Something went wrong"))
    else:
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        col1, col2 = st.columns(2)
        if col1.button("Log in"):
            result = client.login(username, password)
        elif col2.button("Create account"):
            result = client.register(username, password)
        else:
            result = None
        if result is not None:
            if result.get("success"):
                st.rerun()
            else:
                st.warning(result.get("error", "Something went wrong"))

    st.divider()
    file_name, data = export_history(st.session_state.history)
    st.download_button("Export my data", data, file_name=file_name, mime="application/json")

st.caption("Educational use only. Not medical advice.")
