"""Display shaping for lookup results (attribute filtering, ordering, text)."""
