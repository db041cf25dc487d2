"""
Quillmark PDF: place text, checkboxes and signatures on PDF pages.
"""

__version__ = "0.3.0"
