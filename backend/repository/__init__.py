"""Repository layer: SQL helpers over the `users` table (SQLite).

Functions take an open connection and return rows or affected-row counts;
error translation happens in the service layer.
"""
from __future__ import annotations
