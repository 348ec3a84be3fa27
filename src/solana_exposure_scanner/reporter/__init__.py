"""Reporter module - risk narration and result presentation."""
