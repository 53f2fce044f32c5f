"""Application workflows that sit between the CLI/HTTP surfaces and the core."""
