"""Domain layer: booking types, ledgers and the reconciliation engine."""
