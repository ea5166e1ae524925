"""
app.py
Streamlit front end for ezFoodie (single user, local data file).
Run: streamlit run app.py
"""

from __future__ import annotations

import streamlit as st

import config
import utils
from command_parser import ParseError
from commands import ALL_COMMANDS, CommandError
from logger import setup_logger
from logic import Logic

st.set_page_config(page_title="ezFoodie", layout="wide")


def init_once():
    if "logic" not in st.session_state:
        setup_logger()
        st.session_state.logic = Logic.from_file(config.DATA_FILE)
        st.session_state.last_command = None
        st.session_state.last_feedback = None
        st.session_state.last_failed = False


def run_command(command_text: str):
    logic: Logic = st.session_state.logic
    st.session_state.last_command = command_text
    try:
        result = logic.execute(command_text)
        st.session_state.last_feedback = result.feedback
        st.session_state.last_failed = False
    except (ParseError, CommandError) as exc:
        st.session_state.last_feedback = str(exc)
        st.session_state.last_failed = True


# ---------- Pages ----------

def members_page():
    st.header("🍽️ Members")

    with st.form("command_box", clear_on_submit=True):
        command_text = st.text_input(
            "Command", placeholder="e.g. edit -mem -i 1 -p 91234567  (type help to see all commands)"
        )
        submitted = st.form_submit_button("Run", type="primary")
    if submitted and command_text.strip():
        run_command(command_text)

    if st.session_state.last_feedback:
        st.caption(f"> {st.session_state.last_command}")
        if st.session_state.last_failed:
            st.error(st.session_state.last_feedback)
        else:
            st.success(st.session_state.last_feedback)

    st.divider()

    logic: Logic = st.session_state.logic
    shown = logic.get_updated_member_list()
    st.subheader(f"Member list ({len(shown)} of {len(logic.book)})")
    df = utils.members_to_dataframe(shown)
    # index numbers used by -i are 1-based positions in this table
    df.index = range(1, len(df) + 1)
    st.dataframe(df, use_container_width=True)


def reports_page():
    st.header("🧾 Reports")

    members = st.session_state.logic.book.members

    summary = utils.credit_summary(members)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Members", summary["members"])
    c2.metric("Total credit", summary["total"])
    c3.metric("Average credit", f"{summary['mean']:.2f}")
    c4.metric("At credit cap", summary["at_cap"])

    st.divider()

    st.subheader("Export members to CSV")
    if members:
        st.download_button(
            "Download members.csv",
            data=utils.members_to_csv_bytes(members),
            file_name="members.csv",
            mime="text/csv",
        )
        st.download_button(
            "Download transactions.csv",
            data=utils.transactions_to_csv_bytes(members),
            file_name="transactions.csv",
            mime="text/csv",
        )
    else:
        st.caption("No members to export.")


def help_page():
    st.header("❓ Help")
    for command in ALL_COMMANDS:
        with st.expander(command.MESSAGE_USAGE.split(":", 1)[0]):
            st.code(command.MESSAGE_USAGE, language=None)


def settings_page():
    st.header("⚙️ Settings")

    st.write(f"Data file: `{config.DATA_FILE}`")
    st.write(f"Log directory: `{config.LOG_DIR}`")

    st.divider()

    st.subheader("Sample data")
    st.caption("Replaces every member with a small set of sample members.")
    confirm = st.checkbox("I understand the current members will be replaced", value=False)
    if st.button("Load sample data", disabled=not confirm):
        try:
            st.session_state.logic.replace_members(utils.sample_members())
        except CommandError as exc:
            st.error(str(exc))
        else:
            st.success("Sample data loaded.")
            st.rerun()


def main_app():
    st.sidebar.title("🍽️ ezFoodie")

    pages = ["Members", "Reports", "Help", "Settings"]
    if "page" not in st.session_state:
        st.session_state.page = "Members"
    st.session_state.page = st.sidebar.radio("Navigate", pages, index=pages.index(st.session_state.page))

    if st.session_state.page == "Members":
        members_page()
    elif st.session_state.page == "Reports":
        reports_page()
    elif st.session_state.page == "Help":
        help_page()
    elif st.session_state.page == "Settings":
        settings_page()


# --------- App entry ---------

def run():
    init_once()
    main_app()


if __name__ == "__main__":
    run()
