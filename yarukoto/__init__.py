"""
Yarukoto - personal daily task manager
"""
__version__ = "1.0.0"
