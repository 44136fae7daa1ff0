"""Daylight trip planner: candidate scoring and route optimisation."""
