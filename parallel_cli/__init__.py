"""Parallel end-to-end test orchestrator."""
