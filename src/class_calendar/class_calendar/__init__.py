"""Class Calendar package.

Organized by feature modules (subjects, attendance, events, suggestions,
users), each with a thin Flask JSON controller over service and repository
layers.
"""
