"""Services wiring the converters to the generation backend."""
