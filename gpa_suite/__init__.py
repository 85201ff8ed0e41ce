"""GPA engine, transcript parser and record helpers for the GPA Suite app."""
