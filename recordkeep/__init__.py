"""Recordkeep - record management with user accounts and token sessions."""
