"""
This module defines the graphical user interface (GUI) for the TeamNotes application using Streamlit.

It renders the profile sidebar, the note board (create, edit, acknowledge, delete,
filter and search), the audit log and the data import/export page. It holds no
business rules: every action calls the `TeamNotesService` and shows any
`TeamNotesError` as an error message.

The main entry point for the UI is `show_main_app`.
"""
# teamnotes/gui.py

import datetime

import streamlit as st

from modules.errors import TeamNotesError
from modules.models import CATEGORIES, PRIORITIES, ROLES, note_id_of

ALL_OPTION = "all"
STATUS_OPTIONS = [ALL_OPTION, "active", "completed"]


def _format_timestamp(timestamp_str):
    """Converts an ISO 8601 timestamp string into a human-readable local time format.

    Args:
        timestamp_str (str): The ISO-formatted timestamp string.

    Returns:
        str: A formatted string (e.g., "Jan 01, 2023 • 14:30") or the original
             string if conversion fails.
    """
    if not timestamp_str:
        return "Unknown time"
    try:
        clean_value = str(timestamp_str).replace('Z', '+00:00')
        timestamp = datetime.datetime.fromisoformat(clean_value)
        # If no timezone is present, assume UTC.
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=datetime.timezone.utc)
        return timestamp.astimezone().strftime("%b %d, %Y • %H:%M")
    except ValueError:
        return str(timestamp_str)


def _role_label(role):
    return role.capitalize() if role and role != 'guest' else "No role selected"


def _run_action(action, success_message=None):
    """Runs a service call, reporting TeamNotes errors instead of raising them.

    Returns:
        The action's result, or None if it failed.
    """
    try:
        result = action()
    except TeamNotesError as e:
        st.error(str(e))
        return None
    if success_message:
        st.session_state.flash_message = success_message
    return result if result is not None else True


# Profile sidebar
def _render_profile_sidebar(service):
    """Renders the current profile, the profile form and the saved-profile switcher.

    Args:
        service: The main application service instance.
    """
    profile = service.profiles.current()
    with st.sidebar:
        st.markdown(f"### {profile['name']}")
        st.caption(_role_label(profile['role']))
        if profile['license']:
            st.caption(f"Registration: {profile['license']}")

        with st.form("profile_form"):
            role = st.selectbox("Role", ROLES, index=ROLES.index(profile['role']) if profile['role'] in ROLES else 0)
            name = st.text_input("Display name", value="" if profile['name'] == 'Guest' else profile['name'])
            license_no = st.text_input("Registration number", value=profile['license'])
            if st.form_submit_button("Save Profile", use_container_width=True):
                if _run_action(lambda: service.profiles.set_current({"name": name, "role": role, "license": license_no}), "Profile saved."):
                    st.rerun()

        if st.button("Reset Profile", use_container_width=True):
            service.profiles.reset()
            st.rerun()

        saved = [p['name'] for p in service.profiles.directory()]
        if saved:
            st.divider()
            st.markdown("##### Saved profiles")
            selected = st.selectbox("Switch to", saved, key="profile_switch")
            c1, c2 = st.columns(2)
            with c1:
                if st.button("Switch", use_container_width=True):
                    if _run_action(lambda: service.profiles.switch_to(selected), f"Switched to {selected}."):
                        st.rerun()
            with c2:
                if st.button("Forget", use_container_width=True):
                    if _run_action(lambda: service.profiles.forget(selected)):
                        st.rerun()


# Notes board
def _render_note_form(service):
    """Renders the create form, or the edit form when a note is being edited."""
    editing_id = st.session_state.get('editing_note_id')
    note = None
    if editing_id:
        try:
            note = service.notes.get(editing_id)
        except TeamNotesError:
            st.session_state.editing_note_id = None
            editing_id = None

    # Widget keys are per note so the edit form is seeded from the note being edited.
    form_key = editing_id or "new"
    st.subheader("Edit Note" if note else "Create Note")
    with st.form("note_form", clear_on_submit=note is None):
        current_category = (note or {}).get('category', 'Other')
        current_priority = (note or {}).get('priority', 'low')
        category = st.selectbox(
            "Category", CATEGORIES,
            index=CATEGORIES.index(current_category) if current_category in CATEGORIES else len(CATEGORIES) - 1,
            key=f"note_category_{form_key}"
        )
        priority = st.selectbox(
            "Priority", PRIORITIES,
            index=PRIORITIES.index(current_priority) if current_priority in PRIORITIES else 0,
            key=f"note_priority_{form_key}"
        )
        patient_reference = st.text_input("Patient reference (optional)", value=(note or {}).get('patient_reference', ''), key=f"note_patient_reference_{form_key}")
        message = st.text_area("Message", value=(note or {}).get('message', ''), key=f"note_message_{form_key}")
        submitted = st.form_submit_button("Save Note")

    if submitted:
        fields = {"category": category, "priority": priority, "patient_reference": patient_reference, "message": message}
        if note:
            if _run_action(lambda: service.edit_note(editing_id, fields), "Note updated."):
                st.session_state.editing_note_id = None
                st.rerun()
        elif _run_action(lambda: service.add_note(fields), "Note created."):
            st.rerun()

    if note and st.button("Cancel Edit"):
        st.session_state.editing_note_id = None
        st.rerun()


def _render_filters():
    """Renders the search box and filter selectors.

    Returns:
        dict: Keyword arguments for `NoteRepository.query`.
    """
    text = st.text_input("Search messages, patient references and authors", key="filter_text")
    c1, c2, c3 = st.columns(3)
    with c1:
        status = st.selectbox("Status", STATUS_OPTIONS, key="filter_status")
    with c2:
        priority = st.selectbox("Priority", [ALL_OPTION, *PRIORITIES], key="filter_priority")
    with c3:
        category = st.selectbox("Category", [ALL_OPTION, *CATEGORIES], key="filter_category")
    return {"status": status, "priority": priority, "category": category, "text": text}


def _render_note_card(service, note, position, ambiguous_ids):
    """Renders one note with its acknowledgements and action buttons.

    Args:
        service: The main application service instance.
        note (dict): The note to render.
        position (int): The card's index in the displayed list, used in widget keys
            because imported notes may share an id or have none.
        ambiguous_ids (set): Ids that don't identify a single note. Their cards
            show no actions.
    """
    note_id = note_id_of(note)
    status = note.get('status', 'active')
    badge = "✅ Completed" if status == 'completed' else "🕒 Active"
    with st.container(border=True):
        st.markdown(f"**{note.get('category', 'Other')}** · `{note.get('priority', 'low')}` · {badge}")
        st.write(note.get('message', ''))
        if note.get('patient_reference'):
            st.caption(f"Patient: {note['patient_reference']}")
        license_suffix = f" ({note['license']})" if note.get('license') else ""
        st.caption(f"By {note.get('author', 'Guest')}{license_suffix} · {_format_timestamp(note.get('created_at'))}")
        for ack in note.get('acknowledgements') or []:
            if not isinstance(ack, dict):
                continue
            st.caption(f"Acknowledged by {ack.get('actor_name')} ({ack.get('actor_role')}) · {_format_timestamp(ack.get('at'))}")

        if note_id in ambiguous_ids:
            st.caption("This note has a missing or duplicate id. Use Clear All Notes or import a corrected file.")
            return

        key_suffix = f"{position}_{note_id}"
        c1, c2, c3 = st.columns(3)
        with c1:
            if st.button("Ack", key=f"ack_{key_suffix}"):
                if _run_action(lambda: service.acknowledge_note(note_id)):
                    st.rerun()
        with c2:
            if st.button("Edit", key=f"edit_{key_suffix}"):
                st.session_state.editing_note_id = note_id
                st.rerun()
        with c3:
            confirm = st.checkbox("Confirm delete", key=f"confirm_delete_{key_suffix}")
            if st.button("Delete", key=f"delete_{key_suffix}", disabled=not confirm):
                if _run_action(lambda: service.notes.delete(note_id), "Note deleted."):
                    st.rerun()


def _render_notes_page(service):
    """Renders the note form, the filters and the filtered note list.

    Args:
        service: The main application service instance.
    """
    _render_note_form(service)
    st.divider()
    filters = _render_filters()
    notes = service.notes.query(**filters)
    total = service.notes.count()
    showing = "all" if len(notes) == total else f"{len(notes)} shown"
    st.caption(f"{total} notes · {showing}")

    if not notes:
        st.info("You're all up to date!")
        return
    ambiguous_ids = service.notes.ambiguous_ids()
    for position, note in enumerate(notes):
        _render_note_card(service, note, position, ambiguous_ids)


# Audit log
def _render_audit_page(service):
    """Renders the audit log table with CSV download and a confirmed clear action."""
    st.subheader("Audit Log")
    entries = service.audit.list()
    if not entries:
        st.info("No log entries")
    else:
        frame = service.audit.to_frame()
        st.dataframe(frame, use_container_width=True, hide_index=True)
        st.download_button(
            "Download Audit Log (CSV)", frame.to_csv(index=False).encode('utf-8'),
            f"tna-audit-{datetime.date.today()}.csv", "text/csv"
        )

    st.divider()
    confirm = st.checkbox("I understand the audit log will be cleared.", key="confirm_clear_audit")
    if st.button("Clear Audit Log", disabled=not confirm):
        service.audit.clear()
        st.rerun()


# Import / export
def _render_data_page(service):
    """Renders JSON export, JSON import and the confirmed clear-all-notes action."""
    st.subheader("Export")
    st.download_button(
        "Download Export (JSON)", service.transfer.export_json(),
        service.transfer.export_filename(), "application/json"
    )

    st.divider()
    st.subheader("Import")
    st.warning("Importing replaces the notes, audit log and profile contained in the file.")
    uploaded = st.file_uploader("Choose an export file", type=["json"], key="import_file")
    # Each uploaded file is imported once, even though the script reruns.
    if uploaded is not None and st.session_state.get('imported_file_id') != uploaded.file_id:
        st.session_state.imported_file_id = uploaded.file_id
        summary = _run_action(lambda: service.transfer.import_bundle(uploaded.getvalue()))
        if summary:
            st.session_state.flash_message = "Import complete"
            st.session_state.import_warnings = summary["warnings"]
            st.rerun()

    st.divider()
    st.subheader("Danger Zone")
    confirm = st.checkbox("Clear ALL notes? This cannot be undone.", key="confirm_clear_notes")
    if st.button("Clear All Notes", disabled=not confirm):
        service.notes.clear_all()
        st.rerun()


# Main Application UI
def show_main_app(service):
    """
    Renders the whole application: profile sidebar plus the notes, audit and data tabs.

    Args:
        service: The main application service instance.
    """
    if 'editing_note_id' not in st.session_state:
        st.session_state.editing_note_id = None

    _render_profile_sidebar(service)

    st.markdown("<h1 style='text-align: center;'>TeamNotes</h1>", unsafe_allow_html=True)
    counts = service.notes.summary()
    st.caption(f"{counts['active']} active · {counts['completed']} completed")

    flash = st.session_state.pop('flash_message', None)
    if flash:
        st.success(flash)
    for warning in st.session_state.pop('import_warnings', []):
        st.warning(warning)

    notes_tab, audit_tab, data_tab = st.tabs(["Notes", "Audit Log", "Data"])
    with notes_tab:
        _render_notes_page(service)
    with audit_tab:
        _render_audit_page(service)
    with data_tab:
        _render_data_page(service)
