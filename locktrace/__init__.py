# MIT License
# Copyright (c) 2025 Hashborn

"""
locktrace - conviction-voting and vesting lock analytics for Substrate accounts.
"""

__version__ = "0.1.0"
