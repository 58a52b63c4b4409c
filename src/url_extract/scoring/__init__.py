"""Text sufficiency scoring."""
