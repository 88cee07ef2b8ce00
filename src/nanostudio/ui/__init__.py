"""Gradio user interface: form, gallery and pending-call tracking."""
