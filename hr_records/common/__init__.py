"""Common module — shared plumbing for the HR Records entity modules."""
