"""Helpers shared by the parser and the rule engine."""
