"""Booking services: availability, reservations and ops"""
