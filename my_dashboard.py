"""Launcher for ``streamlit run my_dashboard.py``."""
from pomodorostatus.streamlit_app import main

main()
