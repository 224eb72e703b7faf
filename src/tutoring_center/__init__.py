"""Tutoring Center backend package.

This package is organized by feature modules (users, groups, attendance,
payments, coins, ...) with a thin Flask controller layer on top of
service/repository layers.
"""
