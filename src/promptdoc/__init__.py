"""promptdoc: turns role-tagged chat documents into provider-agnostic prompts."""

__version__ = "0.1.0"
