"""Core provisioning logic: validation, records, sync, dispatch and orchestration."""
