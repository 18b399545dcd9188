"""Razorpay webhook inbound pipeline.

Each delivery is signature-verified, interpreted, and (for
payment.authorized) turned into an upsert -> tag -> template message
sequence against Interakt.
"""
