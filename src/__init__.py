"""Session ledger backend."""
