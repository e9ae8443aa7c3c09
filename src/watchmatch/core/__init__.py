"""Series and episode identity resolution."""
