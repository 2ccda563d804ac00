"""Gym booking backend: gym records, bookings and payment checkout."""
