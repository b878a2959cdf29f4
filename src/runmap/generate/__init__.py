"""Map generation and topology maintenance."""
