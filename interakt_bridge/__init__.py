"""Razorpay -> Interakt webhook bridge."""

__version__ = "0.1.0"
