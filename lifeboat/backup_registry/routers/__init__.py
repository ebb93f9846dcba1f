"""HTTP routers for the backup registry."""
