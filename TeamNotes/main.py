"""
This is the main entry point for the TeamNotes Streamlit application.

This script handles the following key responsibilities:
- Sets the overall page configuration for the Streamlit app.
- Configures logging from the runtime settings.
- Initializes the main `TeamNotesService`, which owns all notes, audit and profile state.
- Hands the service to the UI.
"""
# teamnotes/main.py

import streamlit as st

from modules.config import configure_logging, load_settings
from modules.service import TeamNotesService
import gui

# Set the basic configuration for the Streamlit page.
st.set_page_config(
    page_title="TeamNotes",
    layout="wide"
)


# Service Initialization
@st.cache_resource
def get_teamnotes_service():
    """
    Initializes and returns the main TeamNotesService instance.

    This function is decorated with `@st.cache_resource` so the service, and with it
    the in-memory working copy of every collection, is created only once and
    preserved across app reruns.

    Returns:
        TeamNotesService: The single instance of the main application service.
    """
    settings = load_settings()
    configure_logging(settings.log_level)
    return TeamNotesService(settings)


service = get_teamnotes_service()
gui.show_main_app(service)
