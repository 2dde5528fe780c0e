"""Default templates and assets shipped with Staticmark."""
