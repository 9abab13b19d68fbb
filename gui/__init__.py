"""Streamlit front-end for the milk bank pipeline.

`gui.app` owns the live subscription, `gui.state` the per-session view
state, `gui.services` the derived views, and `gui.components` the pieces
the page is drawn from. Only the components import Streamlit.
"""
