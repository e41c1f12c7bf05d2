"""
Centralized Audit Logging System

Tracks who approved, evicted, checked out or billed whom, and when.
"""
