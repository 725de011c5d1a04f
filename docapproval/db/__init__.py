"""Database layer for docapproval."""
