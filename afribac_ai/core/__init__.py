"""Core domain logic: provider resolution, editor context, AI command pipeline."""
