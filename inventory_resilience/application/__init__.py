"""Application layer - compositions over the infrastructure components."""
