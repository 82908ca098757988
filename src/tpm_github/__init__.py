"""Resilient GitHub client and repository validation for the TPM agent."""

__version__ = "1.0.0"
