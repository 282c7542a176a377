"""Shift Tracker package.

Feature modules (shifts, clicks, realtime, admin, ...) sit on top of a
document-store abstraction, with a thin Flask controller layer over the
service layer.
"""
