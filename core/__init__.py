"""Simulation core for the M/M/c and M/G/c queue simulator."""
