"""Decision engine: snooze adjustment, skip evaluation and skip candidate selection."""
