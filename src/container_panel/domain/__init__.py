"""Domain layer - normalized records and the rules that derive them."""
