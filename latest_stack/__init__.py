"""
Latest Stack — latest release versions of languages, frameworks and tools.
"""

__version__ = "0.1.0"
