"""Core configuration and approval logic for docapproval."""
