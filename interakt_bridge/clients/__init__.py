"""Outbound HTTP clients: Interakt (messaging) and Razorpay (order lookup)."""
