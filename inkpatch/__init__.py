"""
Inkpatch - edit the text layer of a PDF page and bake the edits back in.
"""

__version__ = "0.1.0"
