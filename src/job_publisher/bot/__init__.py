"""
WhatsApp chat entry point: command parsing, status record and status web app.
"""
