"""Adapters connecting the resolution engine to files, git, CI and the host."""
