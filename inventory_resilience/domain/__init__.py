"""Domain layer - pure types без залежностей від infrastructure."""
