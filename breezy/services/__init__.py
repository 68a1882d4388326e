"""Use-case orchestration."""
