"""nodectl - LoWAPP node configuration CLI."""
