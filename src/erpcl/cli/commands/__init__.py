"""Command groups registered with the erpcl CLI."""
