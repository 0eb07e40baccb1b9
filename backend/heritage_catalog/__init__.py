"""
Heritage catalog: multilingual content model and injection-safe query fragments
"""

__version__ = "1.0.0"
