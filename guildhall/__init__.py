"""guildhall: adventurer party simulation core"""

__version__ = "0.1.0-alpha"
