"""Chat pipeline: intent parsing, portfolio and route analysis, reply assembly."""
