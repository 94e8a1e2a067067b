# Shared helpers for the PrintHub backend
