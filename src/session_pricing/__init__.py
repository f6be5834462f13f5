"""
Session Pricing Package

Quotation engine for a venue back office. Prices a seating session
(plan, stay time, private room, nominations, add-ons) into an itemized
quote with service tax, and records confirmed payments.
"""

__version__ = "1.0.0"
