"""
Machine translation of structured CMS content through DeepL.
"""

__version__ = "0.1.0"
