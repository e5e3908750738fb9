"""Vacation Tracker package.

Organized by feature modules (users, balances, policy, vacations, ...)
with a thin Flask controller layer over service/repository layers.
"""
