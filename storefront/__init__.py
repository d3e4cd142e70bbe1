"""Terminal food-ordering storefront."""
