"""Format conversion between the OpenAI chat schema and the generation backend."""
