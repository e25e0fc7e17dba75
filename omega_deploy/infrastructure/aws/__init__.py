"""AWS infrastructure adapters."""
