"""Service layer used by the Staticmark CLI."""
