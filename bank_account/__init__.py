"""
Bank Account Console - Source Package

A small interactive console program around a bank account entity
that holds an available and a present balance.

DESIGN PRINCIPLES:
1. Validate before mutating
2. A rejected update leaves the account exactly as it was
3. Every live account is counted
4. Every create/update outcome is auditable
"""

__version__ = "1.0.0"
__author__ = "Bank Account Console Team"
