"""Wire models and the HTTP surface."""
