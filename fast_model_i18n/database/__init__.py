"""MongoDB connection accessors."""
