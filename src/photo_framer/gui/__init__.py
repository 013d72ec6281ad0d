"""
PySide6 desktop front end for the framing pipeline.

Launch with ``photo-framer`` or ``python run_gui.py``.
"""
