"""HTTP interface for the queue simulator."""
