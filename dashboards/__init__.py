"""
Dashboard packages for the weekly safety violation views.

Each submodule owns its own rendering so the data core in
``dashboard_components`` stays free of Streamlit.
"""
