"""Core building blocks shared across the gemproxy package."""
